from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from core.exceptions import LimitReached, ValidationFailure
from expenses.models import Expense
from expenses.services.expense_service import (
    clear_receipt,
    clear_receipts_before,
    create_expense,
    delete_expense,
)
from expenses.services.expense_stats import (
    category_breakdown,
    month_total,
    today_total,
    weekly_series,
)
from users.models import Profile
from users.services.profile_service import ensure_profile

User = get_user_model()

RECEIPT = "https://files.example.com/receipts/r.jpg"


class ExpenseReceiptTests(TestCase):
    """
    GUARANTEES:
    - Receipt bytes are added to / removed from Profile.storage_used
    - Free plan receipt slots are enforced when attaching receipts
    - Expenses without receipts are never gated
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        ensure_profile(self.owner)

    def _storage_used(self):
        return Profile.objects.get(user=self.owner).storage_used

    def test_receipt_size_tracked_and_released(self):
        expense = create_expense(
            owner=self.owner,
            description="Gas bill",
            amount="120",
            category="utilities",
            receipt_url=RECEIPT,
            file_size_bytes=2048,
        )
        self.assertEqual(self._storage_used(), 2048)

        clear_receipt(owner=self.owner, expense_id=expense.pk)
        self.assertEqual(self._storage_used(), 0)

        expense.refresh_from_db()
        self.assertIsNone(expense.receipt_url)

    def test_delete_releases_storage(self):
        expense = create_expense(
            owner=self.owner,
            description="Rent",
            amount="3000",
            category="rent",
            receipt_url=RECEIPT,
            file_size_bytes=4096,
        )
        delete_expense(owner=self.owner, expense_id=expense.pk)
        self.assertEqual(self._storage_used(), 0)

    @override_settings(FREE_TIER_LIMITS={"RECEIPT_SLOTS": 2})
    def test_free_plan_receipt_limit(self):
        for i in range(2):
            create_expense(
                owner=self.owner,
                description=f"Receipt {i}",
                amount="10",
                receipt_url=RECEIPT,
                file_size_bytes=10,
            )

        with self.assertRaises(LimitReached):
            create_expense(
                owner=self.owner,
                description="Third",
                amount="10",
                receipt_url=RECEIPT,
                file_size_bytes=10,
            )

        create_expense(owner=self.owner, description="No receipt", amount="10")
        self.assertEqual(Expense.objects.filter(owner=self.owner).count(), 3)

    def test_storage_quota_enforced(self):
        Profile.objects.filter(user=self.owner).update(storage_limit=1000)
        with self.assertRaises(LimitReached):
            create_expense(
                owner=self.owner,
                description="Big scan",
                amount="10",
                receipt_url=RECEIPT,
                file_size_bytes=1001,
            )

    def test_clear_receipts_before(self):
        create_expense(
            owner=self.owner,
            description="Old",
            amount="10",
            date=date(2025, 1, 5),
            receipt_url=RECEIPT,
            file_size_bytes=500,
        )
        create_expense(
            owner=self.owner,
            description="New",
            amount="10",
            date=date(2025, 3, 5),
            receipt_url=RECEIPT,
            file_size_bytes=700,
        )

        result = clear_receipts_before(owner=self.owner, before=date(2025, 2, 1))
        self.assertEqual(result, {"cleared": 1, "bytes_freed": 500})
        self.assertEqual(self._storage_used(), 700)

    def test_rejects_unknown_category(self):
        with self.assertRaises(ValidationFailure):
            create_expense(owner=self.owner, description="x", amount="1", category="travel")


class ExpenseStatsTests(TestCase):
    """
    GUARANTEES:
    - Totals cover today / the calendar month only
    - Weekly series starts on Monday and has seven days
    - Category breakdown drops zero categories
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.today = date(2025, 3, 12)  # Wednesday

        create_expense(owner=self.owner, description="Veg", amount="40", category="groceries", date=self.today)
        create_expense(owner=self.owner, description="Rice", amount="60", category="groceries", date=date(2025, 3, 10))
        create_expense(owner=self.owner, description="Rent", amount="1000", category="rent", date=date(2025, 3, 1))
        create_expense(owner=self.owner, description="Feb rent", amount="1000", category="rent", date=date(2025, 2, 1))

    def test_today_and_month_totals(self):
        self.assertEqual(today_total(self.owner, today=self.today), Decimal("40.00"))
        self.assertEqual(month_total(self.owner, today=self.today), Decimal("1100.00"))

    def test_weekly_series_is_monday_first(self):
        series = weekly_series(self.owner, today=self.today)
        self.assertEqual(len(series), 7)
        self.assertEqual(series[0]["day"], "Mon")
        self.assertEqual(series[0]["date"], date(2025, 3, 10))
        self.assertEqual(series[0]["amount"], Decimal("60.00"))
        self.assertEqual(series[2]["amount"], Decimal("40.00"))

    def test_category_breakdown(self):
        rows = category_breakdown(self.owner, today=self.today)
        self.assertEqual(
            [(r["category"], r["amount"]) for r in rows],
            [("groceries", Decimal("100.00")), ("rent", Decimal("1000.00"))],
        )


class ExpenseApiTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(self.owner)

    def test_create_and_list(self):
        res = self.client.post(
            "/api/expenses/",
            {"description": "Gas", "amount": "85.00", "category": "utilities"},
            format="json",
        )
        self.assertEqual(res.status_code, 201)

        res = self.client.get("/api/expenses/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 1)

    def test_expired_subscription_blocks_writes_but_not_reads(self):
        profile = ensure_profile(self.owner)
        profile.subscription_status = Profile.STATUS_EXPIRED
        profile.save()

        res = self.client.post(
            "/api/expenses/", {"description": "Gas", "amount": "5"}, format="json"
        )
        self.assertEqual(res.status_code, 403)
        self.assertEqual(self.client.get("/api/expenses/").status_code, 200)

    def test_stats_endpoint(self):
        res = self.client.get("/api/expenses/stats/")
        self.assertEqual(res.status_code, 200)
        self.assertIn("by_category", res.data)
