import os
from dotenv import load_dotenv

load_dotenv()


class ConfigError(Exception):
    pass


_errors = []


def _env_int(name, default):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        _errors.append(f"{name} must be an integer, got {raw!r}")
        return default


def _env_bool(name, default):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# ---------- FIREBASE ----------
FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS", "authsignkey.json")
FIREBASE_DATABASE_URL = os.getenv(
    "FIREBASE_DATABASE_URL", "https://livetvapp-reactjs-default-rtdb.firebaseio.com/"
)
FIREBASE_COLLECTION = os.getenv("FIREBASE_COLLECTION", "channels")

# ---------- SCHEDULE ----------
REFRESH_INTERVAL_MINUTES = _env_int("REFRESH_INTERVAL_MINUTES", 60)

# ---------- BROWSER ----------
NAV_ATTEMPTS = _env_int("NAV_ATTEMPTS", 3)
NAV_TIMEOUT_MS = _env_int("NAV_TIMEOUT_MS", 90000)
SETTLE_SECONDS = _env_int("SETTLE_SECONDS", 45)
WAIT_STRATEGY = os.getenv("WAIT_STRATEGY", "fixed").strip().lower()
HEADLESS = _env_bool("HEADLESS", True)
CHANNEL_SUBSET = [n.strip() for n in os.getenv("CHANNEL_SUBSET", "").split(",") if n.strip()]

# ---------- LOGGING ----------
LOG_FILE = os.getenv("LOG_FILE", "refresher.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def validate():
    """Fail fast on settings the scheduler cannot recover from."""
    if _errors:
        raise ConfigError("; ".join(_errors))
    if not os.path.isfile(FIREBASE_CREDENTIALS):
        raise ConfigError(f"Credential file not found: {FIREBASE_CREDENTIALS}")
    if not FIREBASE_DATABASE_URL:
        raise ConfigError("FIREBASE_DATABASE_URL is empty")
    if WAIT_STRATEGY not in ("fixed", "first_match"):
        raise ConfigError(f"WAIT_STRATEGY must be 'fixed' or 'first_match', got {WAIT_STRATEGY!r}")
    if NAV_ATTEMPTS < 1:
        raise ConfigError("NAV_ATTEMPTS must be at least 1")
    if REFRESH_INTERVAL_MINUTES < 1:
        raise ConfigError("REFRESH_INTERVAL_MINUTES must be at least 1")
