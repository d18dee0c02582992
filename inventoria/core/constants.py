DEFAULT_MIN_STOCK_LEVEL = 5
DEFAULT_EXPIRES_SOON_DAYS = 7
EXPIRES_SOON_DAYS_RANGE = (1, 365)

UNCATEGORIZED = "Uncategorized"

USER_ROLES = ("admin", "user", "overseer")
PRIMARY_ADMIN_USERNAME = "admin"

DEFAULT_USERS = (
    {"username": "admin", "full_name": "Admin User", "role": "admin"},
    {"username": "default", "full_name": "Default User", "role": "user"},
    {"username": "overseer", "full_name": "Overseer User", "role": "overseer"},
)

DEFAULT_CATEGORIES = (
    {"name": "BSA", "description": "BSA related items"},
    {"name": "BR", "description": "BR related items"},
    {"name": "Electronics", "description": "Electronic devices and components"},
    {"name": "Tools", "description": "Hand tools and equipment"},
    {"name": "Food", "description": "Food items and supplies"},
    {"name": "Drinks", "description": "Beverages and drink supplies"},
)

# expires_in_days is relative to the seeding date.
DEFAULT_ITEMS = (
    {
        "name": "Laptop Dell XPS 13",
        "sku": "LAP-001",
        "description": "13-inch ultrabook with Intel i7 processor",
        "category": "Electronics",
        "quantity": 2,
        "unit_price": "999.99",
        "location": "Electronics Storage",
        "min_stock_level": 5,
        "rentable": True,
        "expirable": False,
    },
    {
        "name": "Office Chair",
        "sku": "CHR-001",
        "description": "Ergonomic office chair with lumbar support",
        "category": "BSA",
        "quantity": 1,
        "unit_price": "299.99",
        "location": "Furniture Storage",
        "min_stock_level": 3,
        "rentable": True,
        "expirable": False,
    },
    {
        "name": "Milk Cartons",
        "sku": "MILK-001",
        "description": "Fresh whole milk",
        "category": "Food",
        "quantity": 8,
        "unit_price": "3.50",
        "location": "Cold Storage",
        "min_stock_level": 10,
        "rentable": False,
        "expirable": True,
        "expires_in_days": 5,
    },
    {
        "name": "Protein Bars",
        "sku": "PROT-001",
        "description": "High protein energy bars",
        "category": "Food",
        "quantity": 15,
        "unit_price": "2.99",
        "location": "Pantry",
        "min_stock_level": 5,
        "rentable": False,
        "expirable": True,
        "expires_in_days": 3,
    },
)
