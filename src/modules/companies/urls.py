"""Company URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.companies.views import CompanyViewSet

router = DefaultRouter(trailing_slash=True)
router.register("companies", CompanyViewSet, basename="company")

urlpatterns = router.urls
