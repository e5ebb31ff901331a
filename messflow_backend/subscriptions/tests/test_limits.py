from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework.test import APIClient

from core.exceptions import LimitReached
from subscriptions.services.limits import assert_can_add_member, evaluate_limits, get_limits
from subscriptions.services.subscription import issue_invoice_number
from users.models import Profile
from users.services.profile_service import ensure_profile
from users.tenant import TenantConfig

User = get_user_model()


class EvaluateLimitsTests(SimpleTestCase):
    """
    GUARANTEES:
    - Free plan: allowed iff count < limit
    - Pro plan: always allowed, limit reported as None
    """

    def test_free_plan_boundary(self):
        config = TenantConfig(plan_type="free", invoice_count=50)

        limits = evaluate_limits(config=config, member_count=49, receipt_count=10)
        self.assertTrue(limits.can_add_member)
        self.assertFalse(limits.can_generate_invoice)
        self.assertFalse(limits.can_upload_receipt)
        self.assertEqual(limits.members.limit, 50)

        limits = evaluate_limits(config=config, member_count=50, receipt_count=0)
        self.assertFalse(limits.can_add_member)
        self.assertTrue(limits.can_upload_receipt)

    def test_pro_plan_is_unlimited(self):
        config = TenantConfig(plan_type="pro", invoice_count=5000)
        limits = evaluate_limits(config=config, member_count=10_000, receipt_count=900)

        self.assertTrue(limits.is_pro)
        self.assertTrue(limits.can_add_member)
        self.assertTrue(limits.can_generate_invoice)
        self.assertTrue(limits.can_upload_receipt)
        self.assertIsNone(limits.members.limit)
        self.assertTrue(limits.as_dict()["members"]["unlimited"])


@override_settings(FREE_TIER_LIMITS={"MEMBERS": 2, "INVOICES": 2})
class TenantLimitTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(self.owner)

    def _add_member(self, name):
        return self.client.post(
            "/api/members/members/",
            {"name": name, "phone": "0500000000", "monthly_fee": "300.00"},
            format="json",
        )

    def test_member_create_blocked_at_limit(self):
        self.assertEqual(self._add_member("A").status_code, 201)
        self.assertEqual(self._add_member("B").status_code, 201)

        res = self._add_member("C")
        self.assertEqual(res.status_code, 403)
        with self.assertRaises(LimitReached):
            assert_can_add_member(self.owner)

    def test_pro_plan_skips_member_gate(self):
        profile = ensure_profile(self.owner)
        profile.plan_type = Profile.PLAN_PRO
        profile.save()

        for name in ("A", "B", "C"):
            self.assertEqual(self._add_member(name).status_code, 201)
        self.assertIsNone(get_limits(self.owner).members.limit)

    def test_invoice_numbers_advance_until_limit(self):
        self.assertEqual(issue_invoice_number(owner=self.owner), 1)
        self.assertEqual(issue_invoice_number(owner=self.owner), 2)

        with self.assertRaises(LimitReached):
            issue_invoice_number(owner=self.owner)

        profile = Profile.objects.get(user=self.owner)
        self.assertEqual(profile.invoice_count, 2)
        self.assertEqual(profile.next_invoice_number, 3)

        res = self.client.post("/api/subscription/invoice-number/")
        self.assertEqual(res.status_code, 403)

    def test_limits_endpoint(self):
        res = self.client.get("/api/subscription/limits/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["members"]["limit"], 2)
