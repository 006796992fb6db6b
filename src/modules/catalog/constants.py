"""Catalog constants: validation bounds and the quantity price tiers."""

from decimal import Decimal

CATEGORY_NAME_MAX_LENGTH = 30
DISPLAY_ORDER_MIN = 1
DISPLAY_ORDER_MAX = 100

PRICE_MIN = Decimal("1")
PRICE_MAX = Decimal("1000")

# Upper bound (inclusive) of the quantities billed at ``price`` / ``price50``;
# larger quantities use ``price100``.
TIER_1_MAX_QUANTITY = 50
TIER_2_MAX_QUANTITY = 100
