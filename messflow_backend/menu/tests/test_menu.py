from datetime import date

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from core.exceptions import ValidationFailure
from menu.models import MenuEntry
from menu.services.menu_service import (
    todays_menu,
    upsert_menu_entry,
    week_of_month,
    weekly_menu,
)

User = get_user_model()


class MenuServiceTests(TestCase):
    """
    GUARANTEES:
    - One entry per (week, day); a second upsert updates it
    - Listing is ordered by week, then Monday..Sunday
    - Today's menu falls back to week 1
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")

    def test_upsert_updates_existing_entry(self):
        upsert_menu_entry(owner=self.owner, week_number=2, day="monday", lunch="Biryani")
        upsert_menu_entry(owner=self.owner, week_number=2, day="Monday", lunch="Pulao")

        entry = MenuEntry.objects.get(owner=self.owner)
        self.assertEqual(entry.lunch, "Pulao")
        self.assertEqual(entry.day, "Monday")

    def test_listing_order(self):
        upsert_menu_entry(owner=self.owner, week_number=2, day="Monday", lunch="a")
        upsert_menu_entry(owner=self.owner, week_number=1, day="Sunday", lunch="b")
        upsert_menu_entry(owner=self.owner, week_number=1, day="Tuesday", lunch="c")

        rows = [(m.week_number, m.day) for m in weekly_menu(self.owner)]
        self.assertEqual(rows, [(1, "Tuesday"), (1, "Sunday"), (2, "Monday")])

    def test_rejects_unknown_day(self):
        with self.assertRaises(ValidationFailure):
            upsert_menu_entry(owner=self.owner, day="Funday", lunch="x")

    def test_week_of_month(self):
        self.assertEqual(week_of_month(date(2025, 3, 1)), 1)
        self.assertEqual(week_of_month(date(2025, 3, 8)), 2)
        self.assertEqual(week_of_month(date(2025, 3, 31)), 4)

    def test_todays_menu_falls_back_to_week_one(self):
        upsert_menu_entry(owner=self.owner, week_number=1, day="Wednesday", dinner="Dal")
        # 2025-03-19 is a Wednesday in week 3
        entry = todays_menu(self.owner, today=date(2025, 3, 19))
        self.assertEqual(entry.dinner, "Dal")


class MenuApiTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(self.owner)

    def test_post_is_upsert(self):
        payload = {"week_number": 1, "day": "Friday", "lunch": "Fish curry", "optional_dishes": ["Salad"]}
        self.assertEqual(self.client.post("/api/menu/", payload, format="json").status_code, 200)

        payload["lunch"] = "Chicken curry"
        res = self.client.post("/api/menu/", payload, format="json")
        self.assertEqual(res.data["lunch"], "Chicken curry")
        self.assertEqual(MenuEntry.objects.filter(owner=self.owner).count(), 1)
