from datetime import date, datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from core.exceptions import RecordNotFound, ValidationFailure
from members.models import Member, Transaction
from members.services.member_service import create_member, member_store, member_summary
from members.services.renewal_service import renew_member
from members.services.transaction_service import (
    record_transaction,
    today_collections,
    weekly_collections,
)
from users.models import Profile
from users.services.profile_service import ensure_profile

User = get_user_model()


def _aware(y, m, d, h=12):
    return timezone.make_aware(datetime(y, m, d, h), timezone.get_current_timezone())


class MemberServiceTests(TestCase):
    """
    GUARANTEES:
    - Plan expiry defaults to one month after joining (clamped)
    - Summary counts active members and sums balances
    - Another tenant's members look missing
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")

    def test_default_plan_expiry(self):
        member = create_member(
            owner=self.owner,
            name="Sameer",
            phone="0501111111",
            monthly_fee=Decimal("350"),
            joining_date=date(2025, 1, 31),
        )
        self.assertEqual(member.plan_expiry_date, date(2025, 2, 28))

    def test_summary(self):
        create_member(owner=self.owner, name="A", phone="1", monthly_fee=Decimal("300"), balance=Decimal("120"))
        create_member(owner=self.owner, name="B", phone="2", monthly_fee=Decimal("300"), balance=Decimal("80.50"))
        create_member(owner=self.owner, name="C", phone="3", monthly_fee=Decimal("300"), status=Member.STATUS_INACTIVE)

        summary = member_summary(self.owner)
        self.assertEqual(summary["total_members"], 3)
        self.assertEqual(summary["active_count"], 2)
        self.assertEqual(summary["total_balance"], Decimal("200.50"))

    def test_tenant_isolation(self):
        other = User.objects.create_user(email="other@mess.test", password="pass")
        member = create_member(owner=other, name="X", phone="9", monthly_fee=Decimal("100"))

        with self.assertRaises(RecordNotFound):
            member_store(self.owner).get(member.pk)


class TransactionTests(TestCase):
    """
    GUARANTEES:
    - Only payments count as collections
    - Weekly series is Monday first, seven days
    - Amounts must be positive
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.today = date(2025, 3, 12)  # Wednesday

    def test_collections(self):
        record_transaction(owner=self.owner, amount="300", when=_aware(2025, 3, 12))
        record_transaction(owner=self.owner, amount="150", when=_aware(2025, 3, 10))
        record_transaction(
            owner=self.owner, amount="999", txn_type=Transaction.TYPE_CHARGE, when=_aware(2025, 3, 12)
        )

        self.assertEqual(today_collections(self.owner, today=self.today), Decimal("300.00"))

        series = weekly_collections(self.owner, today=self.today)
        self.assertEqual([d["day"] for d in series], ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"])
        self.assertEqual(series[0]["amount"], Decimal("150.00"))
        self.assertEqual(series[2]["amount"], Decimal("300.00"))

    def test_rejects_non_positive_amount(self):
        with self.assertRaises(ValidationFailure):
            record_transaction(owner=self.owner, amount="0")


class RenewalTests(TestCase):
    """
    GUARANTEES:
    - Renewal sets expiry + active status and records the payment together
    - Optional invoice number comes from the tenant counter
    - At the free-tier invoice limit the renewal still goes through, without an invoice
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.member = create_member(
            owner=self.owner,
            name="Nadia",
            phone="0502222222",
            monthly_fee=Decimal("400"),
            joining_date=date(2025, 1, 15),
            status=Member.STATUS_INACTIVE,
        )

    def test_renew_defaults(self):
        result = renew_member(owner=self.owner, member_id=self.member.pk)

        member = result["member"]
        self.assertEqual(member.status, Member.STATUS_ACTIVE)
        self.assertEqual(member.plan_expiry_date, date(2025, 3, 15))

        txn = result["transaction"]
        self.assertEqual(txn.amount, Decimal("400.00"))
        self.assertEqual(txn.type, Transaction.TYPE_PAYMENT)
        self.assertEqual(txn.notes, "Plan renewal: 2025-02-15 to 2025-03-15")
        self.assertIsNone(result["invoice"])

    def test_renew_with_invoice(self):
        result = renew_member(
            owner=self.owner,
            member_id=self.member.pk,
            end_date=date(2025, 5, 15),
            amount="800",
            generate_invoice=True,
        )
        self.assertEqual(result["invoice"]["invoice_number"], 1)
        self.assertEqual(Profile.objects.get(user=self.owner).next_invoice_number, 2)

    def test_renew_at_invoice_limit_skips_invoice(self):
        profile = ensure_profile(self.owner)
        profile.invoice_count = 50
        profile.next_invoice_number = 51
        profile.save()

        result = renew_member(
            owner=self.owner,
            member_id=self.member.pk,
            amount="400",
            generate_invoice=True,
        )

        self.assertIsNone(result["invoice"])
        self.assertEqual(result["member"].status, Member.STATUS_ACTIVE)
        self.assertEqual(
            Transaction.objects.filter(owner=self.owner, member=self.member).count(), 1
        )
        profile = Profile.objects.get(user=self.owner)
        self.assertEqual(profile.invoice_count, 50)
        self.assertEqual(profile.next_invoice_number, 51)

    def test_end_before_start_rejected(self):
        with self.assertRaises(ValidationFailure):
            renew_member(owner=self.owner, member_id=self.member.pk, end_date=date(2025, 1, 1))

        self.assertFalse(Transaction.objects.filter(owner=self.owner).exists())


class MemberApiTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(self.owner)

    def test_renew_endpoint_not_blocked_by_member_gate(self):
        member = create_member(owner=self.owner, name="Omar", phone="5", monthly_fee=Decimal("250"))
        with self.settings(FREE_TIER_LIMITS={"MEMBERS": 1}):
            res = self.client.post(f"/api/members/members/{member.pk}/renew/", {}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["transaction"]["type"], "payment")

    def test_summary_endpoint(self):
        res = self.client.get("/api/members/members/summary/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["active_count"], 0)
