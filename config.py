import os


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


# Auth settings
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change")
JWT_ALGO = os.getenv("JWT_ALGO", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 8)))

# Storage
DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "printing_orders")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Order policy
LOCK_ON_SUBMIT = _flag("LOCK_ON_SUBMIT", "0")
DELETE_REQUIRES_MUTABLE = _flag("DELETE_REQUIRES_MUTABLE", "1")
SHARE_TTL_DAYS = int(os.getenv("SHARE_TTL_DAYS", "0"))

PORT = int(os.getenv("PORT", "8000"))
