"""給与計算ドメイン"""

from .salary import (
    SalaryLine,
    SalarySheet,
    SalaryTotals,
    StaffMember,
    calculate_salary,
    count_shifts,
    previous_month,
    whatsapp_message,
    whatsapp_share_url,
)

__all__ = [
    "StaffMember",
    "SalaryLine",
    "SalarySheet",
    "SalaryTotals",
    "calculate_salary",
    "count_shifts",
    "previous_month",
    "whatsapp_message",
    "whatsapp_share_url",
]
