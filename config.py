"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

from errors import InvalidConfigurationValueError

load_dotenv()


def _get_int(name: str, default: int, minimum: int = 0) -> int:
    """Read an integer variable, rejecting malformed or out-of-range values."""
    raw = os.getenv(name, str(default)).strip()
    try:
        value = int(raw)
    except ValueError as e:
        raise InvalidConfigurationValueError(
            f"{name} must be an integer, got {raw!r}",
            context={"variable": name},
        ) from e
    if value < minimum:
        raise InvalidConfigurationValueError(
            f"{name} must be >= {minimum}, got {value}",
            context={"variable": name},
        )
    return value


# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = _get_int("DB_PORT", 5432, minimum=1)
DB_NAME: str = os.getenv("DB_NAME", "flowstore")
DB_USER: str = os.getenv("DB_USER", "flowstore")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = os.getenv("DATABASE_URL") or (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

# ── Connection pool ───────────────────────────────────────
DB_POOL_MIN_CONN: int = _get_int("DB_POOL_MIN_CONN", 1)
DB_POOL_MAX_CONN: int = _get_int("DB_POOL_MAX_CONN", 10, minimum=1)
# 0 disables the server-side statement timeout
DB_STATEMENT_TIMEOUT_MS: int = _get_int("DB_STATEMENT_TIMEOUT_MS", 0)

if DB_POOL_MIN_CONN > DB_POOL_MAX_CONN:
    raise InvalidConfigurationValueError(
        "DB_POOL_MIN_CONN cannot exceed DB_POOL_MAX_CONN",
        context={"min": DB_POOL_MIN_CONN, "max": DB_POOL_MAX_CONN},
    )

# ── SQL dialect ───────────────────────────────────────────
SUPPORTED_DIALECTS: tuple[str, ...] = ("postgresql", "ansi")
SQL_DIALECT: str = os.getenv("SQL_DIALECT", "postgresql").strip().lower()

if SQL_DIALECT not in SUPPORTED_DIALECTS:
    raise InvalidConfigurationValueError(
        f"Unsupported SQL_DIALECT {SQL_DIALECT!r}",
        context={"supported": ", ".join(SUPPORTED_DIALECTS)},
    )

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
