from datetime import date, timedelta

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from subscriptions.models import PromoCode
from subscriptions.services.subscription import (
    PromoCodeError,
    apply_promo_code,
    create_promo_code,
    subscription_state,
)
from users.models import Profile
from users.services.profile_service import ensure_profile
from users.tenant import TenantConfig

User = get_user_model()

TODAY = date(2025, 6, 10)


class SubscriptionStateTests(SimpleTestCase):
    """
    GUARANTEES:
    - expired when status is "expired" OR expiry is in the past
    - expiring soon when 0 <= days <= 7
    """

    def test_past_expiry_is_expired(self):
        state = subscription_state(
            TenantConfig(subscription_status="active", subscription_expiry=TODAY - timedelta(days=1)),
            today=TODAY,
        )
        self.assertTrue(state.is_expired)
        self.assertEqual(state.days_until_expiry, -1)
        self.assertFalse(state.is_expiring_soon)

    def test_expiring_soon_window(self):
        state = subscription_state(
            TenantConfig(subscription_status="active", subscription_expiry=TODAY + timedelta(days=7)),
            today=TODAY,
        )
        self.assertFalse(state.is_expired)
        self.assertTrue(state.is_expiring_soon)

    def test_expired_status_without_expiry(self):
        state = subscription_state(TenantConfig(subscription_status="expired"), today=TODAY)
        self.assertTrue(state.is_expired)
        self.assertIsNone(state.days_until_expiry)


class PromoCodeTests(TestCase):
    """
    GUARANTEES:
    - codes are matched case-insensitively and used once
    - expiry extends from the current expiry (or today)
    - codes restricted to other profiles are refused
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.profile = ensure_profile(self.owner)

    def test_extends_from_current_expiry(self):
        self.profile.subscription_expiry = date(2025, 7, 1)
        self.profile.save()
        create_promo_code(code="ramadan30", days_to_add=30)

        result = apply_promo_code(owner=self.owner, code="  Ramadan30 ", today=TODAY)

        self.assertEqual(result["subscription_expiry"], date(2025, 7, 31))
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.subscription_status, Profile.STATUS_ACTIVE)
        promo = PromoCode.objects.get(code="RAMADAN30")
        self.assertTrue(promo.is_used)
        self.assertEqual(promo.used_by_id, self.profile.id)

    def test_extends_from_today_without_expiry(self):
        create_promo_code(code="WELCOME", days_to_add=14)
        result = apply_promo_code(owner=self.owner, code="welcome", today=TODAY)
        self.assertEqual(result["subscription_expiry"], date(2025, 6, 24))

    def test_code_cannot_be_reused(self):
        create_promo_code(code="ONCE", days_to_add=10)
        apply_promo_code(owner=self.owner, code="ONCE", today=TODAY)

        with self.assertRaises(PromoCodeError):
            apply_promo_code(owner=self.owner, code="ONCE", today=TODAY)

    def test_restricted_code(self):
        other = User.objects.create_user(email="other@mess.test", password="pass")
        create_promo_code(code="VIP", days_to_add=60, profiles=[ensure_profile(other)])

        with self.assertRaises(PromoCodeError):
            apply_promo_code(owner=self.owner, code="VIP", today=TODAY)

        apply_promo_code(owner=other, code="VIP", today=TODAY)


class SubscriptionApiTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.admin = User.objects.create_superuser(email="admin@mess.test", password="pass")
        self.client = APIClient()

    def test_only_super_admin_manages_promo_codes(self):
        self.client.force_authenticate(self.owner)
        res = self.client.post("/api/subscription/promo-codes/", {"code": "X1", "days_to_add": 5}, format="json")
        self.assertEqual(res.status_code, 403)

        self.client.force_authenticate(self.admin)
        res = self.client.post("/api/subscription/promo-codes/", {"code": "x1", "days_to_add": 5}, format="json")
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["code"], "X1")

    def test_super_admin_sets_plan(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/subscription/plan/",
            {"user_id": str(self.owner.id), "plan_type": "pro", "subscription_status": "active"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(Profile.objects.get(user=self.owner).plan_type, Profile.PLAN_PRO)

    def test_status_endpoint(self):
        self.client.force_authenticate(self.owner)
        res = self.client.get("/api/subscription/status/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "trial")

    def test_invoice_number_refused_when_expired(self):
        profile = ensure_profile(self.owner)
        profile.subscription_status = "active"
        profile.subscription_expiry = timezone.localdate() - timedelta(days=3)
        profile.save()
        self.client.force_authenticate(self.owner)

        res = self.client.post("/api/subscription/invoice-number/")

        self.assertEqual(res.status_code, 403)
        profile = Profile.objects.get(user=self.owner)
        self.assertEqual(profile.next_invoice_number, 1)
        self.assertEqual(profile.invoice_count, 0)

    def test_invoice_number_issued_while_active(self):
        self.client.force_authenticate(self.owner)
        res = self.client.post("/api/subscription/invoice-number/")
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["invoice_number"], 1)
