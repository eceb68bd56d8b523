from hrms.core.config import Settings


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("HRMS_LOG_LEVEL", "debug")
    monkeypatch.setenv("HRMS_CORS_ORIGINS", "http://localhost:3000, https://hr.example.com,")
    monkeypatch.setenv("HRMS_ATTENDANCE_STATUS_POLICY", "always")

    settings = Settings()

    assert settings.log_level == "DEBUG"
    assert settings.cors_origin_list == ["http://localhost:3000", "https://hr.example.com"]
    assert settings.attendance_status_policy == "always"


def test_sqlite_default():
    settings = Settings(database_url="sqlite:///./hr.db")

    assert settings.is_sqlite is True
    assert Settings(database_url="postgresql://hr@db/hr").is_sqlite is False
