# members/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from members.api.views import MemberViewSet, TransactionViewSet

router = DefaultRouter()
router.register("members", MemberViewSet, basename="member")
router.register("transactions", TransactionViewSet, basename="transaction")

urlpatterns = [
    path("", include(router.urls)),
]
