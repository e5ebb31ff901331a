from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from core.exceptions import ValidationFailure
from inventory.models import InventoryConsumption
from inventory.services.inventory_service import item_store, record_consumption

User = get_user_model()


class InventoryConsumptionTests(TestCase):
    """
    GUARANTEES:
    - Consumption decrements stock and logs the usage together
    - Non-positive or over-stock quantities are refused without writes
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.item = item_store(self.owner).insert(item_name="Rice", quantity=Decimal("25"), unit="kg")

    def test_consumption_decrements_stock(self):
        record_consumption(owner=self.owner, item_id=self.item.pk, quantity_used="4.5", notes="Lunch")

        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal("20.500"))
        self.assertEqual(InventoryConsumption.objects.filter(item=self.item).count(), 1)

    def test_over_stock_refused(self):
        with self.assertRaises(ValidationFailure):
            record_consumption(owner=self.owner, item_id=self.item.pk, quantity_used="30")

        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal("25.000"))
        self.assertFalse(InventoryConsumption.objects.exists())

    def test_non_positive_refused(self):
        with self.assertRaises(ValidationFailure):
            record_consumption(owner=self.owner, item_id=self.item.pk, quantity_used="0")


class InventoryApiTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(self.owner)

    def test_list_is_ordered_by_name(self):
        for name in ("Sugar", "Atta", "Oil"):
            self.client.post("/api/inventory/", {"item_name": name, "quantity": "1", "unit": "kg"}, format="json")

        res = self.client.get("/api/inventory/")
        self.assertEqual([r["item_name"] for r in res.data], ["Atta", "Oil", "Sugar"])

    def test_consume_endpoint(self):
        res = self.client.post("/api/inventory/", {"item_name": "Dal", "quantity": "10", "unit": "kg"}, format="json")
        item_id = res.data["id"]

        res = self.client.post(f"/api/inventory/{item_id}/consume/", {"quantity_used": "12"}, format="json")
        self.assertEqual(res.status_code, 400)

        res = self.client.post(f"/api/inventory/{item_id}/consume/", {"quantity_used": "3"}, format="json")
        self.assertEqual(res.status_code, 201)
