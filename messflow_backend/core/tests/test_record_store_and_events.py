from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from core.events import ACTION_DELETE, ACTION_INSERT, ACTION_UPDATE, Entity, subscribe
from core.exceptions import RecordNotFound, ValidationFailure
from core.record_store import RecordStore
from inventory.models import InventoryItem

User = get_user_model()


class RecordStoreTests(TestCase):
    """
    GUARANTEES:
    - Reads and writes are scoped to the owner
    - Invalid rows are refused before saving
    - Missing ids raise RecordNotFound
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.other = User.objects.create_user(email="other@mess.test", password="pass")
        self.store = RecordStore(InventoryItem, entity=Entity.INVENTORY, owner=self.owner)

    def test_insert_select_update_delete(self):
        item = self.store.insert(item_name="Rice", quantity=Decimal("10"), unit="kg")
        self.assertEqual(self.store.count(), 1)

        self.store.update(item.pk, quantity=Decimal("7"))
        self.assertEqual(self.store.get(item.pk).quantity, Decimal("7.000"))

        self.store.delete(item.pk)
        self.assertEqual(self.store.count(), 0)

    def test_other_tenant_rows_are_invisible(self):
        foreign = RecordStore(InventoryItem, entity=Entity.INVENTORY, owner=self.other).insert(
            item_name="Oil", quantity=Decimal("2"), unit="L"
        )
        self.assertEqual(list(self.store.select()), [])
        with self.assertRaises(RecordNotFound):
            self.store.get(foreign.pk)
        with self.assertRaises(RecordNotFound):
            self.store.delete(foreign.pk)

    def test_validation_failure(self):
        with self.assertRaises(ValidationFailure):
            self.store.insert(item_name="", quantity=Decimal("-1"), unit="kg")
        self.assertEqual(self.store.count(), 0)

    def test_malformed_id_is_not_found(self):
        with self.assertRaises(RecordNotFound):
            self.store.get("not-a-uuid")


class ChangeBusTests(TestCase):
    """
    GUARANTEES:
    - Each write publishes one event after commit
    - Owner-filtered subscriptions only see their tenant
    - Unsubscribe stops delivery
    - A failing handler is logged and does not block the others
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@mess.test", password="pass")
        self.other = User.objects.create_user(email="other@mess.test", password="pass")
        self.events = []
        self.unsubscribe = subscribe(
            Entity.INVENTORY, self.events.append, owner_id=self.owner.pk
        )
        self.addCleanup(self.unsubscribe)

    def test_events_for_each_action(self):
        store = RecordStore(InventoryItem, entity=Entity.INVENTORY, owner=self.owner)
        with self.captureOnCommitCallbacks(execute=True):
            item = store.insert(item_name="Salt", quantity=Decimal("1"), unit="kg")
            store.update(item.pk, quantity=Decimal("2"))
            store.delete(item.pk)

        self.assertEqual(
            [e.action for e in self.events], [ACTION_INSERT, ACTION_UPDATE, ACTION_DELETE]
        )
        self.assertTrue(all(e.record_id == str(item.pk) for e in self.events))

    def test_nothing_published_before_commit(self):
        store = RecordStore(InventoryItem, entity=Entity.INVENTORY, owner=self.owner)
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            store.insert(item_name="Salt", quantity=Decimal("1"), unit="kg")
        self.assertEqual(len(callbacks), 1)
        self.assertEqual(self.events, [])

    def test_other_tenant_filtered(self):
        store = RecordStore(InventoryItem, entity=Entity.INVENTORY, owner=self.other)
        with self.captureOnCommitCallbacks(execute=True):
            store.insert(item_name="Sugar", quantity=Decimal("1"), unit="kg")
        self.assertEqual(self.events, [])

    def test_unsubscribe(self):
        self.unsubscribe()
        store = RecordStore(InventoryItem, entity=Entity.INVENTORY, owner=self.owner)
        with self.captureOnCommitCallbacks(execute=True):
            store.insert(item_name="Tea", quantity=Decimal("1"), unit="kg")
        self.assertEqual(self.events, [])

    def test_failing_handler_is_isolated(self):
        def broken(event):
            raise RuntimeError("boom")

        self.addCleanup(subscribe(Entity.INVENTORY, broken))
        store = RecordStore(InventoryItem, entity=Entity.INVENTORY, owner=self.owner)
        with self.assertLogs("core.events", level="ERROR"):
            with self.captureOnCommitCallbacks(execute=True):
                store.insert(item_name="Rice", quantity=Decimal("1"), unit="kg")
        self.assertEqual(len(self.events), 1)
