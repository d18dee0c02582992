"""Domain errors raised by the inventory core.

Every error carries a machine-readable ``code`` and the structured values the
caller needs, so the HTTP layer can map by type instead of parsing messages.
All of them abort the operation before anything is written.

    InventoryError
    +-- ValidationError
    |   +-- SnapshotRejectedError
    +-- NotFoundError
    +-- InsufficientStockError
    +-- OverReturnError
    +-- CategoryInUseError
    +-- DuplicateError
    |   +-- DuplicateSkuError
    |   +-- DuplicateUsernameError
    |   +-- DuplicateCategoryError
    +-- ProtectedUserError
    +-- ImportFailedError
"""


class InventoryError(Exception):
    code = "INVENTORY_ERROR"

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"code": self.code, "error": self.message}


class ValidationError(InventoryError):
    code = "VALIDATION_ERROR"

    def __init__(self, message, details=None):
        super().__init__(message)
        self.details = details or []

    def to_dict(self):
        payload = super().to_dict()
        if self.details:
            payload["details"] = self.details
        return payload


class SnapshotRejectedError(ValidationError):
    code = "SNAPSHOT_REJECTED"


class NotFoundError(InventoryError):
    code = "NOT_FOUND"

    def __init__(self, kind, record_id):
        super().__init__("{} {} not found".format(kind, record_id))
        self.kind = kind
        self.record_id = record_id


class InsufficientStockError(InventoryError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, item_id, requested, available):
        super().__init__(
            "Insufficient stock available: requested {}, available {}".format(
                requested, available
            )
        )
        self.item_id = item_id
        self.requested = requested
        self.available = available

    def to_dict(self):
        payload = super().to_dict()
        payload.update(requested=self.requested, available=self.available)
        return payload


class OverReturnError(InventoryError):
    code = "OVER_RETURN"

    def __init__(self, item_id, requested, rented):
        super().__init__(
            "Cannot return more items than are currently rented: "
            "requested {}, rented {}".format(requested, rented)
        )
        self.item_id = item_id
        self.requested = requested
        self.rented = rented

    def to_dict(self):
        payload = super().to_dict()
        payload.update(requested=self.requested, rented=self.rented)
        return payload


class CategoryInUseError(InventoryError):
    code = "CATEGORY_IN_USE"

    def __init__(self, category_id, item_count):
        super().__init__(
            "Category is being used by {} item(s). Please reassign or delete "
            "those items first.".format(item_count)
        )
        self.category_id = category_id
        self.item_count = item_count

    def to_dict(self):
        payload = super().to_dict()
        payload["itemCount"] = self.item_count
        return payload


class DuplicateError(InventoryError):
    code = "DUPLICATE"
    field = "value"

    def __init__(self, value):
        super().__init__("{} already exists: {}".format(self.field, value))
        self.value = value


class DuplicateSkuError(DuplicateError):
    code = "DUPLICATE_SKU"
    field = "sku"


class DuplicateUsernameError(DuplicateError):
    code = "DUPLICATE_USERNAME"
    field = "username"


class DuplicateCategoryError(DuplicateError):
    code = "DUPLICATE_CATEGORY"
    field = "category name"


class ProtectedUserError(InventoryError):
    code = "PROTECTED_USER"


class ImportFailedError(InventoryError):
    code = "IMPORT_FAILED"

    def __init__(self, message):
        super().__init__("Failed to import backup: {}".format(message))
        self.reason = message

    def to_dict(self):
        payload = super().to_dict()
        payload["details"] = "The database has been restored to a safe state with default data."
        return payload


__all__ = [
    "CategoryInUseError",
    "DuplicateCategoryError",
    "DuplicateError",
    "DuplicateSkuError",
    "DuplicateUsernameError",
    "ImportFailedError",
    "InsufficientStockError",
    "InventoryError",
    "NotFoundError",
    "OverReturnError",
    "ProtectedUserError",
    "SnapshotRejectedError",
    "ValidationError",
]
