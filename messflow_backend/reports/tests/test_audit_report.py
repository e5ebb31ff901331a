from datetime import date, datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from expenses.services.expense_service import create_expense
from members.services.transaction_service import record_transaction
from pettycash.models import PettyCashTransaction
from pettycash.services.ledger_service import add_refill, add_small_expense
from reports.services.audit_report import (
    ExpenseRow,
    PaymentRow,
    PettyCashRow,
    SalaryRow,
    StaffRow,
    build_report,
    generate_audit_report,
)
from reports.services.report_service import get_audit_report
from staff.services.payroll_service import pay_salary
from staff.services.staff_service import create_staff

User = get_user_model()

MARCH = date(2025, 3, 1)


class BuildReportTests(SimpleTestCase):
    """
    GUARANTEES:
    - net_profit = revenue - fixed - variable, exactly
    - salaries come from the manifest, not from "salaries" expenses
    - empty inputs give an all-zero report
    - petty cash totals and closing balance only use entries dated in the month
    """

    def setUp(self):
        self.expenses = [
            ExpenseRow("rent", Decimal("3000"), date(2025, 3, 1)),
            ExpenseRow("groceries", Decimal("1200.50"), date(2025, 3, 9)),
            ExpenseRow("utilities", Decimal("450"), date(2025, 3, 20)),
            ExpenseRow("salaries", Decimal("2000"), date(2025, 3, 28)),
            ExpenseRow("groceries", Decimal("999"), date(2025, 4, 1)),
        ]
        self.payments = [
            PaymentRow(Decimal("8000"), date(2025, 3, 2)),
            PaymentRow(Decimal("1500"), date(2025, 3, 31)),
            PaymentRow(Decimal("700"), date(2025, 2, 28)),
        ]
        self.staff = [
            StaffRow("s1", "Aisha", "cleaner", Decimal("2000")),
            StaffRow("s2", "Ravi", "cook", Decimal("2500")),
        ]
        self.salaries = [SalaryRow("s1", Decimal("2000"), "March 2025")]

    def _report(self):
        return build_report(
            month=MARCH,
            expenses=self.expenses,
            payments=self.payments,
            staff=self.staff,
            salaries=self.salaries,
            petty_cash=[],
        )

    def test_totals(self):
        report = self._report()
        self.assertEqual(report["total_revenue"], Decimal("9500.00"))
        self.assertEqual(report["rent_cost"], Decimal("3000.00"))
        self.assertEqual(report["total_variable_costs"], Decimal("1650.50"))
        self.assertEqual(report["total_fixed_costs"], Decimal("5000.00"))
        self.assertEqual(report["net_profit"], Decimal("2849.50"))
        self.assertEqual(
            report["net_profit"],
            report["total_revenue"] - report["total_fixed_costs"] - report["total_variable_costs"],
        )
        self.assertEqual(report["member_stats"]["payment_count"], 2)
        self.assertEqual(report["month"], "March")
        self.assertEqual(report["year"], 2025)

    def test_salary_manifest(self):
        manifest = {row["staff_name"]: row for row in self._report()["salary_manifest"]}
        self.assertEqual(manifest["Aisha"]["status"], "paid")
        self.assertEqual(manifest["Aisha"]["paid_amount"], Decimal("2000.00"))
        self.assertEqual(manifest["Ravi"]["status"], "pending")
        self.assertEqual(manifest["Ravi"]["paid_amount"], Decimal("0.00"))

    def test_category_breakdown_percentages(self):
        rows = self._report()["category_breakdown"]
        self.assertEqual(
            [r["category"] for r in rows],
            ["Groceries", "Utilities", "Rent", "Salaries"],
        )
        # 6650.50 total: 18.05 / 6.77 / 45.11 / 30.07
        self.assertEqual([r["percentage"] for r in rows], [18, 7, 45, 30])
        total = sum(r["percentage"] for r in rows)
        self.assertLessEqual(abs(total - 100), len(rows))

    def test_empty_month_is_all_zero(self):
        report = build_report(
            month=MARCH, expenses=[], payments=[], staff=[], salaries=[], petty_cash=[]
        )
        self.assertEqual(report["net_profit"], Decimal("0.00"))
        self.assertEqual(report["category_breakdown"], [])
        self.assertEqual(report["petty_cash_summary"]["closing_balance"], Decimal("0.00"))

    def test_petty_cash_summary_stays_inside_month(self):
        petty_cash = [
            PettyCashRow("refill", Decimal("500"), Decimal("500"), date(2025, 2, 27), 1),
            PettyCashRow("refill", Decimal("200"), Decimal("700"), date(2025, 3, 3), 2),
            PettyCashRow("expense", Decimal("50"), Decimal("650"), date(2025, 3, 3), 3),
            PettyCashRow("expense", Decimal("30"), Decimal("620"), date(2025, 4, 1), 4),
        ]
        report = build_report(
            month=MARCH, expenses=[], payments=[], staff=[], salaries=[], petty_cash=petty_cash
        )

        summary = report["petty_cash_summary"]
        self.assertEqual(summary["total_refills"], Decimal("200.00"))
        self.assertEqual(summary["total_spent"], Decimal("50.00"))
        # same day: the later entry closes the month
        self.assertEqual(summary["closing_balance"], Decimal("650.00"))

    def test_petty_cash_closing_is_zero_without_entries_in_month(self):
        petty_cash = [
            PettyCashRow("refill", Decimal("500"), Decimal("500"), date(2025, 2, 27), 1),
        ]
        report = build_report(
            month=MARCH, expenses=[], payments=[], staff=[], salaries=[], petty_cash=petty_cash
        )
        self.assertEqual(report["petty_cash_summary"]["total_refills"], Decimal("0.00"))
        self.assertEqual(report["petty_cash_summary"]["closing_balance"], Decimal("0.00"))


class GenerateAuditReportTests(TestCase):
    """
    GUARANTEES:
    - Staff are pending for a month until a payment for that month exists
    - A refill withdrawn from the ledger is counted once (as an "other" expense)
    - The audit petty cash summary is read from the ledger rows dated in the month
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.aisha = create_staff(owner=self.owner, name="Aisha", role="cleaner", base_salary="2000")

    def _manifest_row(self):
        report = generate_audit_report(self.owner, month=MARCH)
        return next(r for r in report["salary_manifest"] if r["staff_name"] == "Aisha")

    def test_aisha_pending_until_paid(self):
        row = self._manifest_row()
        self.assertEqual(row["status"], "pending")
        self.assertEqual(row["paid_amount"], Decimal("0.00"))

        pay_salary(owner=self.owner, staff_id=self.aisha.pk, amount="2000", month=MARCH)

        row = self._manifest_row()
        self.assertEqual(row["status"], "paid")
        self.assertEqual(row["paid_amount"], Decimal("2000.00"))

        report = generate_audit_report(self.owner, month=MARCH)
        self.assertEqual(report["total_fixed_costs"], Decimal("2000.00"))
        self.assertEqual(report["total_variable_costs"], Decimal("0.00"))

    def test_revenue_and_expenses_from_records(self):
        record_transaction(owner=self.owner, amount="500", when=None)
        today_report = generate_audit_report(self.owner, month=timezone.localdate())
        self.assertEqual(today_report["total_revenue"], Decimal("500.00"))

        create_expense(owner=self.owner, description="Rent", amount="1000", category="rent", date=MARCH)
        report = generate_audit_report(self.owner, month=MARCH)
        self.assertEqual(report["rent_cost"], Decimal("1000.00"))
        self.assertEqual(report["net_profit"], Decimal("-1000.00"))

    def test_petty_cash_summary_from_ledger(self):
        def at(y, m, d):
            return timezone.make_aware(datetime(y, m, d, 10), timezone.get_current_timezone())

        feb = add_refill(owner=self.owner, amount="500")
        refill = add_refill(owner=self.owner, amount="200")
        spend = add_small_expense(owner=self.owner, amount="50", description="Gas")
        april = add_small_expense(owner=self.owner, amount="30", description="Bread")

        PettyCashTransaction.objects.filter(pk=feb.pk).update(date=at(2025, 2, 27))
        PettyCashTransaction.objects.filter(pk__in=[refill.pk, spend.pk]).update(date=at(2025, 3, 3))
        PettyCashTransaction.objects.filter(pk=april.pk).update(date=at(2025, 4, 1))

        summary = generate_audit_report(self.owner, month=MARCH)["petty_cash_summary"]
        self.assertEqual(summary["total_refills"], Decimal("200.00"))
        self.assertEqual(summary["total_spent"], Decimal("50.00"))
        self.assertEqual(summary["closing_balance"], Decimal("650.00"))


class ReportCacheTests(TestCase):
    """
    GUARANTEES:
    - A cached report is served until a dependent entity changes
    - The change event drops the tenant's cached copy
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")

    @override_settings(REPORT_CACHE_TIMEOUT=60)
    def test_change_event_drops_cached_report(self):
        first = get_audit_report(self.owner, month=timezone.localdate())
        self.assertEqual(first["total_revenue"], Decimal("0.00"))

        with self.captureOnCommitCallbacks(execute=True):
            record_transaction(owner=self.owner, amount="250")

        second = get_audit_report(self.owner, month=timezone.localdate())
        self.assertEqual(second["total_revenue"], Decimal("250.00"))

    @override_settings(REPORT_CACHE_TIMEOUT=60)
    def test_cached_copy_served_without_events(self):
        get_audit_report(self.owner, month=timezone.localdate())

        # on_commit callbacks never run inside this TestCase, so no event fires
        add_refill(owner=self.owner, amount="100")

        cached = get_audit_report(self.owner, month=timezone.localdate())
        self.assertEqual(cached["petty_cash_summary"]["total_refills"], Decimal("0.00"))


class ReportsApiTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(self.owner)

    def test_audit_endpoint(self):
        res = self.client.get("/api/reports/audit/?month=2025-03")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["month"], "March")

    def test_audit_rejects_bad_month(self):
        res = self.client.get("/api/reports/audit/?month=March")
        self.assertEqual(res.status_code, 400)

    def test_insights_and_dashboard(self):
        self.assertEqual(self.client.get("/api/reports/insights/").status_code, 200)
        self.assertEqual(self.client.get("/api/reports/dashboard/").status_code, 200)
