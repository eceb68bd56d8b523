from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Optional

CENT = Decimal("0.01")

HOURS_PER_MONTH = Decimal(30 * 8)
OVERTIME_MULTIPLIER = Decimal("1.5")
TAX_RATE = Decimal("0.15")
SOCIAL_SECURITY_RATE = Decimal("0.062")
HEALTH_INSURANCE_RATE = Decimal("0.05")

EARNING_FIELDS = ("basic_salary", "allowances", "overtime_pay", "bonus")
DEDUCTION_FIELDS = ("tax", "social_security", "health_insurance", "other_deductions")


def to_money(value: Any) -> Decimal:
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PayBreakdown:
    basic_salary: Decimal
    allowances: Decimal
    overtime_pay: Decimal
    tax: Decimal
    social_security: Decimal
    health_insurance: Decimal

    @property
    def gross(self) -> Decimal:
        return self.basic_salary + self.allowances + self.overtime_pay


def overtime_rate(basic_salary: Any) -> Decimal:
    return Decimal(str(basic_salary or 0)) / HOURS_PER_MONTH


def compute_pay(basic_salary: Any, allowances: Any, overtime_hours: float) -> PayBreakdown:
    """Monthly earnings and flat-rate deductions for one employee."""
    basic = to_money(basic_salary)
    extra = to_money(allowances)
    overtime_pay = to_money(Decimal(str(overtime_hours or 0)) * overtime_rate(basic) * OVERTIME_MULTIPLIER)
    gross = basic + extra + overtime_pay
    return PayBreakdown(
        basic_salary=basic,
        allowances=extra,
        overtime_pay=overtime_pay,
        tax=to_money(gross * TAX_RATE),
        social_security=to_money(gross * SOCIAL_SECURITY_RATE),
        health_insurance=to_money(gross * HEALTH_INSURANCE_RATE),
    )


def apply_payroll_totals(record: Any, now: Optional[Callable[[], Any]] = None) -> Any:
    """Recompute totals and net pay from components and stamp status timestamps once."""
    for field in EARNING_FIELDS + DEDUCTION_FIELDS:
        setattr(record, field, to_money(getattr(record, field)))

    record.total_earnings = sum((getattr(record, f) for f in EARNING_FIELDS), Decimal("0.00"))
    record.total_deductions = sum((getattr(record, f) for f in DEDUCTION_FIELDS), Decimal("0.00"))
    record.net_salary = record.total_earnings - record.total_deductions

    if now is not None:
        if record.status == "processed" and record.processed_at is None:
            record.processed_at = now()
        if record.status == "paid" and record.paid_at is None:
            record.paid_at = now()
    return record


def payslip_number(year: int, month: int, employee_ref: Any) -> str:
    suffix = str(employee_ref).zfill(4)[-4:]
    return f"PAY{year}{month:02d}{suffix}"
