import os

# In a real deployment, load these from the environment or a secrets manager
SECRET_KEY: str = os.getenv(
    "SECRET_KEY", "your-secret-key-for-jwt-!ChangeMe!"
)
ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# Database
DATABASE_URL: str = os.getenv(
    "DATABASE_URL", "sqlite+aiosqlite:///./home_inventory.sqlite3"
)
DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))
DB_ECHO: bool = os.getenv("DB_ECHO", "False").lower() in ("true", "1", "t")

# Upper bound for a single report read; 0 disables the bound
REPORT_QUERY_TIMEOUT_SECONDS: float = float(os.getenv("REPORT_QUERY_TIMEOUT_SECONDS", "30"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
# Comma separated logger prefixes, e.g. "home_inventory.features.reports,home_inventory.main"
LOG_NAMESPACES: list[str] = [
    ns.strip() for ns in os.getenv("LOG_NAMESPACES", "").split(",") if ns.strip()
]
