"""
======================================================
PATH: users/migrations/0001_initial.py
======================================================
MIGRATION: CREATE User + Profile (tenant)
"""

from __future__ import annotations

import uuid

import django.core.validators
import django.db.models.deletion
import users.models.profile
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("password", models.CharField(max_length=128, verbose_name="password")),
                (
                    "last_login",
                    models.DateTimeField(blank=True, null=True, verbose_name="last login"),
                ),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Designates that this user has all permissions without explicitly assigning them.",
                        verbose_name="superuser status",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("full_name", models.CharField(blank=True, max_length=150)),
                (
                    "role",
                    models.CharField(
                        choices=[("mess_owner", "Mess owner"), ("super_admin", "Super admin")],
                        default="mess_owner",
                        max_length=20,
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("is_staff", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "groups",
                    models.ManyToManyField(
                        blank=True,
                        help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.group",
                        verbose_name="groups",
                    ),
                ),
                (
                    "user_permissions",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Specific permissions for this user.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.permission",
                        verbose_name="user permissions",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Profile",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("business_name", models.CharField(default="Business", max_length=200)),
                ("company_address", models.TextField(blank=True, default="")),
                ("company_logo_url", models.URLField(blank=True, default="", max_length=500)),
                (
                    "currency",
                    models.CharField(
                        default=users.models.profile._default_currency, max_length=3
                    ),
                ),
                ("tax_name", models.CharField(blank=True, default="VAT", max_length=50)),
                (
                    "tax_rate",
                    models.DecimalField(
                        decimal_places=2,
                        default=5,
                        max_digits=5,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("tax_trn", models.CharField(blank=True, default="", max_length=50)),
                (
                    "plan_type",
                    models.CharField(
                        choices=[("free", "Free"), ("pro", "Professional")],
                        default="free",
                        max_length=10,
                    ),
                ),
                (
                    "subscription_status",
                    models.CharField(
                        choices=[("trial", "Trial"), ("active", "Active"), ("expired", "Expired")],
                        default="trial",
                        max_length=10,
                    ),
                ),
                ("subscription_expiry", models.DateField(blank=True, null=True)),
                ("payment_link", models.URLField(blank=True, default="", max_length=500)),
                ("invoice_count", models.PositiveIntegerField(default=0)),
                ("next_invoice_number", models.PositiveIntegerField(default=1)),
                ("storage_used", models.PositiveBigIntegerField(default=0)),
                (
                    "storage_limit",
                    models.PositiveBigIntegerField(
                        default=users.models.profile._default_storage_limit
                    ),
                ),
                ("settings_version", models.PositiveSmallIntegerField(default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Tenant profile",
                "verbose_name_plural": "Tenant profiles",
            },
        ),
    ]
