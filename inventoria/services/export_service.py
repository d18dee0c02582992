import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font

from inventoria.core.constants import UNCATEGORIZED
from inventoria.core.dates import days_until, end_of_day, normalize_date
from inventoria.core.errors import ValidationError
from inventoria.core.stock_rules import effective_min_stock, is_expired, is_low_stock

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

INVENTORY_COLUMNS = (
    "Item ID",
    "Name",
    "SKU",
    "Description",
    "Category",
    "Quantity",
    "Unit Price",
    "Total Value",
    "Location",
    "Min Stock Level",
    "Status",
    "Rentable",
    "Expirable",
    "Rented Count",
    "Broken Count",
    "Expiration Date",
    "Days Until Expiry",
    "Is Low Stock",
    "Is Expired",
    "Created At",
    "Updated At",
)

ACTIVITY_COLUMNS = (
    "Transaction ID",
    "Date",
    "Time",
    "Type",
    "Item Name",
    "Item ID",
    "Quantity",
    "Unit Price",
    "Total Value",
    "User",
    "User ID",
    "Notes",
    "Created At",
)


def _is_set(value):
    return value is not None and str(value).strip() != "" and str(value).strip().lower() != "all"


def _flag(value):
    return str(value).strip().lower() == "true"


def _yes_no(value):
    return "Yes" if value else "No"


def _money(value):
    return format(Decimal(value or 0).quantize(Decimal("0.01")), "f")


def _to_int(value, field):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(
            "Invalid export filter",
            details=[{"field": field, "message": "must be an integer"}],
        ) from None


def filter_items(items, categories, filters=None, today=None):
    filters = filters or {}
    if today is None:
        today = date.today()
    selected = list(items)

    category = filters.get("category")
    if _is_set(category):
        if str(category).lower() == "uncategorized":
            selected = [item for item in selected if item.category_id is None]
        else:
            match = next((entry for entry in categories if entry.name == category), None)
            if match is not None:
                selected = [item for item in selected if item.category_id == match.id]

    status = filters.get("status")
    if _is_set(status):
        selected = [item for item in selected if item.status == status]

    for field in ("rentable", "expirable"):
        value = filters.get(field)
        if _is_set(value):
            wanted = _flag(value)
            selected = [item for item in selected if getattr(item, field) == wanted]

    if _flag(filters.get("low_stock")):
        selected = [item for item in selected if is_low_stock(item.quantity, item.min_stock_level)]
    if _flag(filters.get("expired")):
        selected = [
            item
            for item in selected
            if is_expired(item.expirable, item.expiration_date, today=today)
        ]
    return selected


def filter_transactions(transactions, filters=None, now=None):
    filters = filters or {}
    if now is None:
        now = datetime.now().astimezone()
    selected = list(transactions)

    kind = filters.get("type")
    if _is_set(kind):
        selected = [entry for entry in selected if entry.type == kind]
    user_id = filters.get("user_id")
    if _is_set(user_id):
        user_id = _to_int(user_id, "userId")
        selected = [entry for entry in selected if entry.user_id == user_id]
    item_id = filters.get("item_id")
    if _is_set(item_id):
        item_id = _to_int(item_id, "itemId")
        selected = [entry for entry in selected if entry.item_id == item_id]

    days = filters.get("days")
    if _is_set(days):
        cutoff = now - timedelta(days=_to_int(days, "days"))
        selected = [entry for entry in selected if entry.created_at >= cutoff]
    else:
        date_from = normalize_date(filters.get("date_from"))
        if date_from is not None:
            start = datetime.combine(date_from, datetime.min.time(), tzinfo=now.tzinfo)
            selected = [entry for entry in selected if entry.created_at >= start]
        date_to = end_of_day(filters.get("date_to"))
        if date_to is not None:
            date_to = date_to.replace(tzinfo=now.tzinfo)
            selected = [entry for entry in selected if entry.created_at <= date_to]
    return selected


def inventory_rows(items, categories, today=None):
    if today is None:
        today = date.today()
    names = {category.id: category.name for category in categories}
    for item in items:
        expiration = normalize_date(item.expiration_date)
        yield (
            item.id,
            item.name,
            item.sku,
            item.description or "",
            names.get(item.category_id, UNCATEGORIZED) if item.category_id is not None else UNCATEGORIZED,
            item.quantity,
            _money(item.unit_price),
            _money(item.quantity * item.unit_price),
            item.location or "",
            effective_min_stock(item.min_stock_level),
            item.status or "active",
            _yes_no(item.rentable),
            _yes_no(item.expirable),
            item.rented_count or 0,
            item.broken_count or 0,
            expiration.isoformat() if expiration else "",
            days_until(expiration, today=today) if expiration else "",
            _yes_no(is_low_stock(item.quantity, item.min_stock_level)),
            _yes_no(is_expired(item.expirable, expiration, today=today)),
            item.created_at.isoformat(),
            item.updated_at.isoformat(),
        )


def activity_rows(transactions, items, users):
    item_names = {item.id: item.name for item in items}
    user_names = {user.id: user.full_name for user in users}
    for entry in transactions:
        local = entry.created_at.astimezone()
        unit_price = entry.unit_price or Decimal("0")
        yield (
            entry.id,
            local.strftime("%Y-%m-%d"),
            local.strftime("%H:%M:%S"),
            entry.type.capitalize(),
            item_names.get(entry.item_id, "System/Unknown") if entry.item_id is not None else "System/Unknown",
            entry.item_id if entry.item_id is not None else "",
            entry.quantity,
            _money(unit_price),
            _money(entry.quantity * unit_price),
            user_names.get(entry.user_id, "System"),
            entry.user_id,
            entry.notes or "",
            entry.created_at.isoformat(),
        )


def _write_sheet(title, columns, rows, max_width):
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = title
    sheet.append(list(columns))
    for cell in sheet[1]:
        cell.font = Font(bold=True)

    widths = [len(column) for column in columns]
    for row in rows:
        sheet.append(list(row))
        for index, value in enumerate(row):
            widths[index] = max(widths[index], len(str(value)))
    for index, column_cells in enumerate(sheet.iter_cols(min_row=1, max_row=1)):
        letter = column_cells[0].column_letter
        sheet.column_dimensions[letter].width = min(widths[index] + 2, max_width)

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def build_inventory_workbook(items, categories, filters=None, today=None):
    selected = filter_items(items, categories, filters, today=today)
    logger.info("Exporting %s of %s item(s) to xlsx", len(selected), len(items))
    return _write_sheet(
        "Inventory",
        INVENTORY_COLUMNS,
        list(inventory_rows(selected, categories, today=today)),
        max_width=50,
    )


def build_activity_workbook(transactions, items, users, filters=None, now=None):
    selected = filter_transactions(transactions, filters, now=now)
    logger.info("Exporting %s of %s transaction(s) to xlsx", len(selected), len(transactions))
    return _write_sheet(
        "Activity",
        ACTIVITY_COLUMNS,
        list(activity_rows(selected, items, users)),
        max_width=30,
    )


def inventory_filename_parts(filters):
    filters = filters or {}
    parts = []
    if _is_set(filters.get("category")):
        parts.append("category-{}".format(filters["category"]))
    if _is_set(filters.get("status")):
        parts.append("status-{}".format(filters["status"]))
    for field in ("rentable", "expirable"):
        if filters.get(field) is not None:
            parts.append("{}-{}".format(field, filters[field]))
    if _flag(filters.get("low_stock")):
        parts.append("low-stock")
    if _flag(filters.get("expired")):
        parts.append("expired")
    return parts


def activity_filename_parts(filters):
    filters = filters or {}
    parts = []
    if _is_set(filters.get("type")):
        parts.append("type-{}".format(filters["type"]))
    if _is_set(filters.get("user_id")):
        parts.append("user-{}".format(filters["user_id"]))
    if _is_set(filters.get("item_id")):
        parts.append("item-{}".format(filters["item_id"]))
    if filters.get("days"):
        parts.append("{}days".format(filters["days"]))
    if filters.get("date_from"):
        parts.append("from-{}".format(filters["date_from"]))
    if filters.get("date_to"):
        parts.append("to-{}".format(filters["date_to"]))
    return parts


def export_filename(prefix, parts=None, today=None, extension="xlsx"):
    if today is None:
        today = date.today()
    suffix = "_" + "_".join(parts) if parts else ""
    return "{}{}_{}.{}".format(prefix, suffix, today.isoformat(), extension)


__all__ = [
    "XLSX_MEDIA_TYPE",
    "activity_filename_parts",
    "build_activity_workbook",
    "build_inventory_workbook",
    "export_filename",
    "filter_items",
    "filter_transactions",
    "inventory_filename_parts",
]
