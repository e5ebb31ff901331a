# PATH: reports/services/report_service.py

"""
REPORT ENTRY POINTS (cached)

get_insights()     -> alerts + variance for the month containing `today`
get_audit_report() -> audit report for one calendar month
get_dashboard()    -> headline numbers for the home screen (never cached)
"""

from __future__ import annotations

from datetime import date

from core.dates import month_bounds, today as local_today
from expenses.services.expense_stats import expense_stats
from members.services.member_service import member_summary
from members.services.transaction_service import today_collections, weekly_collections
from pettycash.services.ledger_service import current_balance
from reports.services.audit_report import generate_audit_report
from reports.services.business_intelligence import business_insights
from reports.services.cache import cached_view
from subscriptions.services.subscription import get_subscription_state


def get_insights(owner, *, today: date | None = None) -> dict:
    day = today or local_today()
    return cached_view(
        "alerts",
        owner.pk,
        day.isoformat(),
        lambda: business_insights(owner, today=day),
    )


def get_audit_report(owner, *, month: date) -> dict:
    first, _ = month_bounds(month)
    return cached_view(
        "audit",
        owner.pk,
        first.isoformat(),
        lambda: generate_audit_report(owner, month=first),
    )


def get_dashboard(owner, *, today: date | None = None) -> dict:
    day = today or local_today()
    return {
        "members": member_summary(owner),
        "today_collections": today_collections(owner, today=day),
        "weekly_collections": weekly_collections(owner, today=day),
        "expenses": expense_stats(owner, today=day),
        "petty_cash_balance": current_balance(owner),
        "subscription": get_subscription_state(owner).as_dict(),
    }
