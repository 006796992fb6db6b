"""Order routes.

``orders/`` lists the caller's orders (``?status=`` tab filter);
``orders/<id>/`` adds detail and staff edits, plus the lifecycle actions
``start-processing``, ``ship``, ``cancel``, ``pay-now`` and
``payment-confirmation``.
"""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.orders.views import OrderViewSet

router = DefaultRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
