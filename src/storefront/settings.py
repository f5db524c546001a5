"""Business settings read from the environment.

Values are read once at import time. Conversion rates are only defaults: each
product carries its own rates and each order snapshots them at checkout.
"""

import os

DEFAULT_USD_TO_BDT = float(os.getenv("STOREFRONT_USD_TO_BDT", "121.5"))
DEFAULT_CNY_TO_BDT = float(os.getenv("STOREFRONT_CNY_TO_BDT", "17.5"))

# Flat shipping charge per order, in BDT
AIR_SHIPPING_BDT = float(os.getenv("STOREFRONT_AIR_SHIPPING_BDT", "1500"))
SEA_SHIPPING_BDT = float(os.getenv("STOREFRONT_SEA_SHIPPING_BDT", "1000"))

COUPON_CODE = os.getenv("STOREFRONT_COUPON_CODE", "BSM5")
COUPON_RATE = float(os.getenv("STOREFRONT_COUPON_RATE", "0.05"))

ORDER_NUMBER_PREFIX = os.getenv("STOREFRONT_ORDER_PREFIX", "BSM-ORD")
