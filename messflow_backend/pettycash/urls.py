from django.urls import include, path
from rest_framework.routers import DefaultRouter

from pettycash.api.views import PettyCashViewSet

router = DefaultRouter()
router.register("", PettyCashViewSet, basename="petty-cash")

urlpatterns = [
    path("", include(router.urls)),
]
