from typing import Dict

from inventoria.schemas.common import ApiModel


class DashboardStats(ApiModel):
    total_items: int
    total_value: float
    low_stock_count: int
    today_transactions: int


class RentalStats(ApiModel):
    rented_count: int
    broken_count: int


class StockReport(ApiModel):
    levels: Dict[str, int]
    expired_count: int
    item_count: int
