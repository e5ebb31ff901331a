from django.urls import include, path
from rest_framework.routers import DefaultRouter

from menu.api.views import MenuViewSet

router = DefaultRouter()
router.register("", MenuViewSet, basename="menu")

urlpatterns = [
    path("", include(router.urls)),
]
