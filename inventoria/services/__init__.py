from inventoria.services.audit_service import AdminFallbackResolver, TransactionLogger
from inventoria.services.backup_service import BackupCoordinator
from inventoria.services.catalog_service import CatalogService
from inventoria.services.stock_service import StockLedger
from inventoria.services.view_service import InventoryViews

__all__ = [
    "AdminFallbackResolver",
    "BackupCoordinator",
    "CatalogService",
    "InventoryViews",
    "StockLedger",
    "TransactionLogger",
]
