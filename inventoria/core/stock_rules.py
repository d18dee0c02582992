from datetime import date

from inventoria.core.constants import DEFAULT_MIN_STOCK_LEVEL
from inventoria.core.dates import normalize_date

CRITICAL = "critical"
URGENT = "urgent"
LOW = "low"
GOOD = "good"
SATURATED = "saturated"

STOCK_LEVELS = (CRITICAL, URGENT, LOW, GOOD, SATURATED)

STOCK_LABELS = {
    CRITICAL: "Out of Stock",
    URGENT: "Urgent",
    LOW: "Low Stock",
    GOOD: "Good",
    SATURATED: "Saturated",
}

URGENT_RATIO = 0.3
SATURATION_RATIO = 2.5


def effective_min_stock(min_stock_level):
    # 0 and None both fall back to the default, as the item form submits 0 for blank.
    if not min_stock_level:
        return DEFAULT_MIN_STOCK_LEVEL
    return min_stock_level


def stock_level(quantity, min_stock_level=None):
    minimum = effective_min_stock(min_stock_level)
    quantity = quantity or 0
    if quantity == 0:
        return CRITICAL
    if quantity <= minimum * URGENT_RATIO:
        return URGENT
    if quantity < minimum:
        return LOW
    if quantity <= minimum * SATURATION_RATIO:
        return GOOD
    return SATURATED


def stock_label(level):
    return STOCK_LABELS[level]


def is_low_stock(quantity, min_stock_level=None):
    return (quantity or 0) < effective_min_stock(min_stock_level)


def stock_percentage(quantity, min_stock_level=None):
    minimum = effective_min_stock(min_stock_level)
    return min(100.0, (quantity or 0) / minimum * 100)


def is_expired(expirable, expiration_date, today=None):
    if not expirable:
        return False
    expires_on = normalize_date(expiration_date)
    if expires_on is None:
        return False
    if today is None:
        today = date.today()
    return expires_on <= today


def expires_within(expirable, expiration_date, threshold_days, today=None):
    if not expirable:
        return False
    expires_on = normalize_date(expiration_date)
    if expires_on is None:
        return False
    if today is None:
        today = date.today()
    return 0 <= (expires_on - today).days <= threshold_days


def classify_item(item, today=None):
    level = stock_level(item.quantity, item.min_stock_level)
    return {
        "level": level,
        "label": stock_label(level),
        "percentage": stock_percentage(item.quantity, item.min_stock_level),
        "expired": is_expired(item.expirable, item.expiration_date, today=today),
    }
