# storefront/utils/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# memory = dicts in process, sql = SQLAlchemy (sqlite:// is still in-memory)
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")

# local = threading locks, redis = distributed lock per user
LOCK_BACKEND = os.getenv("LOCK_BACKEND", "local")
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
LOCK_TTL_SECONDS = int(os.getenv("LOCK_TTL_SECONDS", 30))
LOCK_WAIT_SECONDS = float(os.getenv("LOCK_WAIT_SECONDS", 5))

# checkout pricing
FREE_SHIPPING_THRESHOLD = Decimal(os.getenv("FREE_SHIPPING_THRESHOLD", "50"))
SHIPPING_FEE = Decimal(os.getenv("SHIPPING_FEE", "10"))
EXPRESS_DELIVERY_FEE = Decimal(os.getenv("EXPRESS_DELIVERY_FEE", "15"))
TAX_RATE = Decimal(os.getenv("TAX_RATE", "0.08"))

SEED_CATALOG = _flag("SEED_CATALOG")
SEED_ADMIN_USERNAME = os.getenv("SEED_ADMIN_USERNAME", "")

STOREFRONT_API_URL = os.getenv("STOREFRONT_API_URL", "http://localhost:8000")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
