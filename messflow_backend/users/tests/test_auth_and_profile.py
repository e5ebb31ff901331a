import os
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from rest_framework.test import APIClient

from core.exceptions import ValidationFailure
from users.models import Profile
from users.services.profile_service import (
    adjust_storage_used,
    ensure_profile,
    update_business_settings,
)
from users.tenant import TenantConfig, get_tenant_config

User = get_user_model()


class RegisterAndLoginTests(TestCase):
    """
    GUARANTEES:
    - Registration creates the tenant profile in the same request
    - Login returns a JWT pair for valid credentials only
    """

    def setUp(self):
        self.client = APIClient()

    def test_register_creates_profile_with_business_name(self):
        res = self.client.post(
            "/api/auth/register/",
            {
                "email": "owner@mess.test",
                "password": "Sup3r-Secret-99",
                "business_name": "Al Noor Mess",
                "currency": "SAR",
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertIn("access", res.data)

        profile = Profile.objects.get(user__email="owner@mess.test")
        self.assertEqual(profile.business_name, "Al Noor Mess")
        self.assertEqual(profile.currency, "SAR")
        self.assertEqual(profile.plan_type, Profile.PLAN_FREE)
        self.assertEqual(profile.subscription_status, Profile.STATUS_TRIAL)

    def test_login_rejects_wrong_password(self):
        User.objects.create_user(email="owner@mess.test", password="right-pass-123")
        res = self.client.post(
            "/api/auth/login/",
            {"email": "owner@mess.test", "password": "wrong"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_login_returns_tokens(self):
        User.objects.create_user(email="owner@mess.test", password="right-pass-123")
        res = self.client.post(
            "/api/auth/login/",
            {"email": "owner@mess.test", "password": "right-pass-123"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertIn("refresh", res.data)
        self.assertEqual(res.data["user"]["email"], "owner@mess.test")


class TenantConfigTests(TestCase):
    """
    GUARANTEES:
    - A tenant without a profile reads documented defaults
    - Profile values flow through the typed config
    """

    def setUp(self):
        self.user = User.objects.create_user(email="owner@mess.test", password="pass")

    def test_defaults_without_profile(self):
        config = get_tenant_config(self.user)
        self.assertEqual(config.schema_version, TenantConfig.SCHEMA_VERSION)
        self.assertEqual(config.currency, "AED")
        self.assertEqual(config.plan_type, "free")
        self.assertEqual(config.invoice_count, 0)
        self.assertEqual(config.storage_limit, 104857600)
        self.assertEqual(config.subscription_status, "trial")
        self.assertIsNone(config.profile_id)
        self.assertFalse(config.is_pro)

    def test_reads_profile_values(self):
        profile = ensure_profile(self.user)
        profile.plan_type = Profile.PLAN_PRO
        profile.currency = "kwd"
        profile.invoice_count = 7
        profile.save()

        config = get_tenant_config(self.user)
        self.assertTrue(config.is_pro)
        self.assertEqual(config.currency, "KWD")
        self.assertEqual(config.invoice_count, 7)
        self.assertEqual(config.profile_id, str(profile.id))


class ProfileServiceTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="owner@mess.test", password="pass")

    def test_update_business_settings(self):
        profile = update_business_settings(
            owner=self.user,
            business_name="Green Leaf Mess",
            currency="omr",
            tax_rate=Decimal("10.00"),
        )
        self.assertEqual(profile.business_name, "Green Leaf Mess")
        self.assertEqual(profile.currency, "OMR")
        self.assertEqual(profile.tax_rate, Decimal("10.00"))

    def test_rejects_unsupported_currency(self):
        with self.assertRaises(ValidationFailure):
            update_business_settings(owner=self.user, currency="USD")

    def test_rejects_non_editable_fields(self):
        with self.assertRaises(ValidationFailure):
            update_business_settings(owner=self.user, plan_type="pro")

    def test_storage_used_never_goes_negative(self):
        adjust_storage_used(owner=self.user, delta_bytes=1000)
        adjust_storage_used(owner=self.user, delta_bytes=-5000)
        self.assertEqual(Profile.objects.get(user=self.user).storage_used, 0)

    def test_profile_endpoint_patch(self):
        client = APIClient()
        client.force_authenticate(self.user)
        res = client.patch(
            "/api/auth/profile/", {"business_name": "Blue Mess"}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["business_name"], "Blue Mess")


class EnsureSuperuserCommandTests(TestCase):
    """
    GUARANTEES:
    - Without AUTO_ADMIN_* the command is a no-op
    - With them set it creates (or promotes) a super admin, idempotently
    """

    def test_skips_without_env(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            call_command("ensure_superuser", stdout=StringIO())
        self.assertFalse(User.objects.filter(is_superuser=True).exists())

    def test_creates_then_updates(self):
        env = {"AUTO_ADMIN_EMAIL": "root@mess.test", "AUTO_ADMIN_PASSWORD": "R00t-Pass-42"}
        with mock.patch.dict(os.environ, env):
            call_command("ensure_superuser", stdout=StringIO())
            call_command("ensure_superuser", stdout=StringIO())

        admins = User.objects.filter(email="root@mess.test")
        self.assertEqual(admins.count(), 1)
        admin = admins.get()
        self.assertTrue(admin.is_superuser)
        self.assertEqual(admin.role, User.ROLE_SUPER_ADMIN)
        self.assertTrue(admin.check_password("R00t-Pass-42"))
