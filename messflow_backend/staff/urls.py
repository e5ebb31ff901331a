from django.urls import include, path
from rest_framework.routers import DefaultRouter

from staff.api.views import StaffViewSet

router = DefaultRouter()
router.register("", StaffViewSet, basename="staff")

urlpatterns = [
    path("", include(router.urls)),
]
