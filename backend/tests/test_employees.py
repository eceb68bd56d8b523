from conftest import auth_header, make_employee, make_user


def employee_payload(email="jordan@example.com", **professional):
    info = {
        "department": "Engineering",
        "position": "Backend Developer",
        "start_date": "2024-01-15",
        "salary": {"basic": 5000, "allowances": 750},
    }
    info.update(professional)
    return {
        "personal_info": {
            "first_name": "Jordan",
            "last_name": "Lee",
            "email": email,
            "phone": "4075550123",
            "date_of_birth": "1992-04-09",
            "gender": "other",
            "address": {"street": "9 Elm St", "city": "Tampa", "state": "FL", "zip_code": "33601"},
            "emergency_contact": {"name": "Sam Lee", "relationship": "Partner", "phone": "4075550999"},
        },
        "professional_info": info,
    }


def test_create_employee_assigns_code_and_account(client, hr_headers):
    response = client.post("/api/employees", json=employee_payload(), headers=hr_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Employee created successfully"
    employee = body["data"]["employee"]
    assert employee["employee_code"] == "EMP0001"
    assert employee["full_name"] == "Jordan Lee"
    assert employee["user"]["email"] == "jordan@example.com"
    assert employee["personal_info"]["address"]["country"] == "USA"
    assert employee["professional_info"]["salary"] == {
        "basic": 5000.0,
        "allowances": 750.0,
        "currency": "USD",
        "total": 5750.0,
    }

    login = client.post("/api/auth/login", json={"email": "jordan@example.com", "password": "temp123456"})
    assert login.status_code == 200
    assert login.json()["data"]["user"]["employee_code"] == "EMP0001"


def test_sequential_codes(client, hr_headers):
    client.post("/api/employees", json=employee_payload(), headers=hr_headers)
    second = client.post("/api/employees", json=employee_payload(email="kim@example.com"), headers=hr_headers)

    assert second.json()["data"]["employee"]["employee_code"] == "EMP0002"


def test_duplicate_user_email_rejected(client, hr_headers):
    make_user("jordan@example.com")

    response = client.post("/api/employees", json=employee_payload(), headers=hr_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "User already exists with this email"


def test_explicit_code_must_be_unique(client, hr_headers):
    make_employee(employee_code="EMP0500")
    payload = employee_payload()
    payload["employee_code"] = "emp0500"
    payload["create_user_account"] = False

    response = client.post("/api/employees", json=payload, headers=hr_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Employee ID already exists"


def test_create_requires_staff_role(client, worker_headers):
    response = client.post("/api/employees", json=employee_payload(), headers=worker_headers)

    assert response.status_code == 403


def test_invalid_department_is_a_validation_error(client, hr_headers):
    response = client.post("/api/employees", json=employee_payload(department="Space"), headers=hr_headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "professional_info.department"


def test_unknown_manager_rejected(client, hr_headers):
    response = client.post(
        "/api/employees", json=employee_payload(reporting_manager_id=999), headers=hr_headers
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Reporting manager not found"


def test_reporting_cycle_rejected(client, hr_headers):
    lead = make_employee(first_name="Lead")
    mid = make_employee(first_name="Mid", reporting_manager_id=lead.id)
    junior = make_employee(first_name="Junior", reporting_manager_id=mid.id)

    response = client.put(
        f"/api/employees/{lead.id}",
        json={"professional_info": {"reporting_manager_id": junior.id}},
        headers=hr_headers,
    )
    self_managed = client.put(
        f"/api/employees/{lead.id}",
        json={"professional_info": {"reporting_manager_id": lead.id}},
        headers=hr_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Reporting manager assignment would create a cycle"
    assert self_managed.status_code == 400


def test_direct_reports_and_manager_summary(client, hr_headers):
    lead = make_employee(first_name="Lead")
    make_employee(first_name="Report", reporting_manager_id=lead.id)

    reports = client.get(f"/api/employees/{lead.id}/reports", headers=hr_headers).json()["data"]["reports"]

    assert [r["personal_info"]["first_name"] for r in reports] == ["Report"]
    assert reports[0]["professional_info"]["reporting_manager"]["employee_code"] == lead.employee_code


def test_update_employee_fields(client, hr_headers):
    lead = make_employee(first_name="Lead")
    employee = make_employee(reporting_manager_id=lead.id)

    response = client.put(
        f"/api/employees/{employee.id}",
        json={
            "personal_info": {"phone": "4075551111"},
            "professional_info": {"position": "Staff Engineer", "reporting_manager_id": None, "salary": {"basic": 6000}},
            "status": "on-leave",
        },
        headers=hr_headers,
    )

    assert response.status_code == 200
    updated = response.json()["data"]["employee"]
    assert updated["personal_info"]["phone"] == "4075551111"
    assert updated["professional_info"]["position"] == "Staff Engineer"
    assert updated["professional_info"]["reporting_manager_id"] is None
    assert updated["professional_info"]["salary"]["total"] == 6200.0
    assert updated["status"] == "on-leave"


def test_list_filters_and_pagination(client, hr_headers):
    for index in range(3):
        make_employee(first_name=f"Eng{index}")
    make_employee(first_name="Seller", department="Sales")

    response = client.get("/api/employees", params={"department": "Engineering", "limit": 2}, headers=hr_headers)
    body = response.json()["data"]

    assert len(body["employees"]) == 2
    assert body["pagination"] == {"current": 1, "pages": 2, "total": 3, "limit": 2}

    search = client.get("/api/employees", params={"search": "sell"}, headers=hr_headers).json()["data"]
    assert [e["personal_info"]["first_name"] for e in search["employees"]] == ["Seller"]


def test_employee_can_only_view_own_record(client, staff_member, worker_headers):
    _, own = staff_member
    other = make_employee(first_name="Other")

    assert client.get(f"/api/employees/{own.id}", headers=worker_headers).status_code == 200
    denied = client.get(f"/api/employees/{other.id}", headers=worker_headers)
    assert denied.status_code == 403
    assert denied.json()["message"] == "Access denied"


def test_missing_employee(client, hr_headers):
    response = client.get("/api/employees/404", headers=hr_headers)

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Employee not found"}


def test_stats_overview(client, hr_headers):
    make_employee(first_name="A")
    make_employee(first_name="B", department="Sales", employment_type="contract")
    make_employee(first_name="C", status="terminated")

    data = client.get("/api/employees/stats/overview", headers=hr_headers).json()["data"]

    assert data["overview"]["total"] == 3
    assert data["overview"]["active"] == 2
    assert data["overview"]["terminated"] == 1
    assert {row["department"]: row["count"] for row in data["department_stats"]} == {"Engineering": 1, "Sales": 1}


def test_delete_terminates_and_deactivates(client, admin_headers, hr_headers, staff_member):
    user, employee = staff_member

    forbidden = client.delete(f"/api/employees/{employee.id}", headers=hr_headers)
    response = client.delete(f"/api/employees/{employee.id}", headers=admin_headers)

    assert forbidden.status_code == 403
    assert response.status_code == 200
    assert response.json()["message"] == "Employee deleted successfully"
    assert client.get(f"/api/employees/{employee.id}", headers=admin_headers).json()["data"]["employee"]["status"] == "terminated"
    assert client.get("/api/auth/profile", headers=auth_header(user.id)).json()["message"] == "Account is deactivated"
