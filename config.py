import os
import sys

from dotenv import load_dotenv

from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test scripts to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)

# Parse RUNTIME_ENVIRONMENT with clear error message on misconfiguration
try:
    _runtime_env_str = os.environ.get("RUNTIME_ENVIRONMENT")
    if not _runtime_env_str:
        raise ValueError("RUNTIME_ENVIRONMENT environment variable is not set")
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(_runtime_env_str)
except ValueError as e:
    valid_values = [env.value for env in RuntimeEnvironment]
    print(f"\n ERROR: Invalid RUNTIME_ENVIRONMENT configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_values)}", file=sys.stderr)
    print(f"Current value: {os.environ.get('RUNTIME_ENVIRONMENT', '(not set)')}", file=sys.stderr)
    print(f"\nAdd to .env: RUNTIME_ENVIRONMENT={valid_values[0]}\n", file=sys.stderr)
    sys.exit(1)

# Database
DB_NAME = os.environ.get("DB_NAME", "emenu.db")

# Redis (cart snapshot store)
REDIS_HOST = os.environ.get("REDIS_HOST", "localhost")
REDIS_PORT = int(os.environ.get("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.environ.get("REDIS_PASSWORD") or None
REDIS_DB = int(os.environ.get("REDIS_DB", "0"))

# Cart Configuration
# CART_STORE_BACKEND: "redis" (shared) or "file" (single device, data/ folder)
CART_STORE_BACKEND = os.environ.get("CART_STORE_BACKEND", "file").lower()
if CART_STORE_BACKEND not in ("redis", "file"):
    print(f"\n ERROR: Invalid CART_STORE_BACKEND configuration\n", file=sys.stderr)
    print(f"Valid values: redis, file", file=sys.stderr)
    print(f"Current value: {CART_STORE_BACKEND}\n", file=sys.stderr)
    sys.exit(1)
CART_STORE_NAME = os.environ.get("CART_STORE_NAME", "e-menum-cart-store")
CART_STORE_PATH = os.environ.get("CART_STORE_PATH", "data/cart-store.json")

# Currency used for cart lines when neither the caller nor the restaurant context names one
DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "TRY").upper()
if len(DEFAULT_CURRENCY) != 3:
    print(f"\n ERROR: DEFAULT_CURRENCY must be a 3-letter ISO code (got: {DEFAULT_CURRENCY})\n", file=sys.stderr)
    sys.exit(1)

MENU_LANGUAGE = os.environ.get("MENU_LANGUAGE", "tr")  # Default to Turkish

# Logging Configuration
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Mask customer PII in logs

# Log Retention: Environment-specific defaults
# Dev: keep a month for debugging
# Prod: Use 5 days default to save disk space
if RUNTIME_ENVIRONMENT == RuntimeEnvironment.DEV:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "30"))
else:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "5"))
