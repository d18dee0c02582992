from fastapi import APIRouter, Depends

from inventoria.dependencies import get_views
from inventoria.schemas.dashboard import DashboardStats, RentalStats, StockReport

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(views=Depends(get_views)):
    return views.dashboard_stats()


@router.get("/rentals", response_model=RentalStats)
def rental_stats(views=Depends(get_views)):
    return views.rental_stats()


@router.get("/stock-report", response_model=StockReport)
def stock_report(views=Depends(get_views)):
    return views.stock_report()


__all__ = ["router"]
