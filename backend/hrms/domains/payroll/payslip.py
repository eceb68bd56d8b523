from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from io import BytesIO
from typing import Any, List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from hrms.core.config import settings
from hrms.models import Payroll


@dataclass(frozen=True)
class PayslipContext:
    payslip_number: str
    employee_code: str
    employee_name: str
    department: str
    position: str
    period_start: date
    period_end: date
    status: str
    paid_at: datetime | None
    working_days: int
    present_days: int
    overtime_hours: float
    basic_salary: float
    allowances: float
    overtime_pay: float
    bonus: float
    gross_pay: float
    tax: float
    social_security: float
    health_insurance: float
    other_deductions: float
    total_deductions: float
    net_pay: float
    ytd_gross: float
    ytd_deductions: float
    ytd_net: float
    currency: str


def _money(value: float) -> str:
    return f"{value:,.2f}"


def _fmt_date(value: date | None) -> str:
    if not value:
        return "-"
    return value.strftime("%b %d, %Y")


def build_context(record: Payroll, ytd: dict) -> PayslipContext:
    employee = record.employee
    return PayslipContext(
        payslip_number=record.payslip_number,
        employee_code=employee.employee_code,
        employee_name=employee.full_name,
        department=employee.department,
        position=employee.position,
        period_start=record.start_date,
        period_end=record.end_date,
        status=record.status,
        paid_at=record.paid_at,
        working_days=record.working_days,
        present_days=record.present_days,
        overtime_hours=float(record.overtime_hours or 0),
        basic_salary=float(record.basic_salary),
        allowances=float(record.allowances),
        overtime_pay=float(record.overtime_pay),
        bonus=float(record.bonus),
        gross_pay=float(record.total_earnings),
        tax=float(record.tax),
        social_security=float(record.social_security),
        health_insurance=float(record.health_insurance),
        other_deductions=float(record.other_deductions),
        total_deductions=float(record.total_deductions),
        net_pay=float(record.net_salary),
        ytd_gross=ytd["gross"],
        ytd_deductions=ytd["deductions"],
        ytd_net=ytd["net"],
        currency=employee.currency,
    )


def _amount_table(rows: List[List[Any]]) -> Table:
    table = Table(rows, colWidths=[3.3 * inch, 1.5 * inch, 1.5 * inch])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.whitesmoke),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                ("LINEABOVE", (0, -1), (-1, -1), 0.75, colors.black),
                ("LEFTPADDING", (0, 0), (-1, -1), 6),
                ("RIGHTPADDING", (0, 0), (-1, -1), 6),
                ("TOPPADDING", (0, 0), (-1, -1), 4),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    return table


def _build_story(context: PayslipContext) -> List[Any]:
    styles = getSampleStyleSheet()
    header_style = ParagraphStyle("slip_header", parent=styles["Heading3"], fontSize=11)
    body_style = ParagraphStyle("slip_body", parent=styles["Normal"], fontSize=9.5)

    story: List[Any] = [Paragraph("PAYSLIP", styles["Title"])]
    story.append(
        Table(
            [
                [
                    Paragraph(
                        f"<b>{escape(settings.company_name)}</b><br/>{escape(settings.company_address)}",
                        body_style,
                    ),
                    Paragraph(
                        (
                            f"<b>{escape(context.employee_name)}</b><br/>"
                            f"Employee ID: {context.employee_code}<br/>"
                            f"{context.department} / {escape(context.position)}"
                        ),
                        body_style,
                    ),
                ]
            ],
            colWidths=[3.35 * inch, 3.35 * inch],
        )
    )

    story.append(HRFlowable(width="100%"))
    story.append(Spacer(1, 8))

    story.append(
        Table(
            [
                ["Payslip no.", context.payslip_number, "Pay period",
                 f"{_fmt_date(context.period_start)} - {_fmt_date(context.period_end)}"],
                ["Status", context.status.title(), "Paid on",
                 _fmt_date(context.paid_at.date() if context.paid_at else None)],
                ["Days worked", f"{context.present_days} / {context.working_days}", "Overtime hours",
                 f"{context.overtime_hours:.2f}"],
            ],
            colWidths=[1.0 * inch, 2.5 * inch, 1.1 * inch, 2.1 * inch],
        )
    )

    story.append(Spacer(1, 10))
    story.append(Paragraph(f"Earnings ({context.currency})", header_style))
    story.append(
        _amount_table(
            [
                ["Description", "Current", "YTD"],
                ["Basic salary", _money(context.basic_salary), ""],
                ["Allowances", _money(context.allowances), ""],
                ["Overtime", _money(context.overtime_pay), ""],
                ["Bonus", _money(context.bonus), ""],
                ["Gross pay", _money(context.gross_pay), _money(context.ytd_gross)],
            ]
        )
    )

    story.append(Spacer(1, 12))
    story.append(Paragraph(f"Deductions ({context.currency})", header_style))
    story.append(
        _amount_table(
            [
                ["Deduction", "Current", "YTD"],
                ["Income tax", _money(context.tax), ""],
                ["Social security", _money(context.social_security), ""],
                ["Health insurance", _money(context.health_insurance), ""],
                ["Other", _money(context.other_deductions), ""],
                ["Total deductions", _money(context.total_deductions), _money(context.ytd_deductions)],
            ]
        )
    )

    story.append(Spacer(1, 12))
    story.append(HRFlowable(width="100%"))
    story.append(Spacer(1, 6))
    story.append(
        Table(
            [
                [
                    Paragraph("<b>Net pay</b>", body_style),
                    Paragraph(f"<b>{_money(context.net_pay)}</b>", body_style),
                    Paragraph(f"<b>{_money(context.ytd_net)}</b>", body_style),
                ]
            ],
            colWidths=[3.3 * inch, 1.5 * inch, 1.5 * inch],
        )
    )
    return story


def render_payslip_pdf(context: PayslipContext) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        leftMargin=0.6 * inch,
        rightMargin=0.6 * inch,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
        title=f"Payslip {context.payslip_number}",
    )
    doc.build(_build_story(context))
    return buffer.getvalue()
