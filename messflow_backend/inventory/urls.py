from django.urls import include, path
from rest_framework.routers import DefaultRouter

from inventory.api.views import InventoryItemViewSet

router = DefaultRouter()
router.register("", InventoryItemViewSet, basename="inventory-item")

urlpatterns = [
    path("", include(router.urls)),
]
