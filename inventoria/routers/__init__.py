from inventoria.routers.categories import router as categories_router
from inventoria.routers.dashboard import router as dashboard_router
from inventoria.routers.database import router as database_router
from inventoria.routers.health import router as health_router
from inventoria.routers.items import router as items_router
from inventoria.routers.settings import router as settings_router
from inventoria.routers.transactions import router as transactions_router
from inventoria.routers.users import router as users_router

__all__ = [
    "categories_router",
    "dashboard_router",
    "database_router",
    "health_router",
    "items_router",
    "settings_router",
    "transactions_router",
    "users_router",
]
