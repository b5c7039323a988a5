import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    REDIS_OPERATION_TIMEOUT = float(data.get("REDIS_OPERATION_TIMEOUT", 5.0))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    # 32 bytes, used as the A256GCM content key
    ENCRYPTION_KEY = data.get("ENCRYPTION_KEY", "dev-encryption-key-32-bytes-long")
    TOKEN_VALIDITY_MINUTES = int(data.get("TOKEN_VALIDITY_MINUTES", 15))
    REFRESH_KEY_HASH_ROUNDS = int(data.get("REFRESH_KEY_HASH_ROUNDS", 12))
    SESSION_KEY_PREFIX = data.get("SESSION_KEY_PREFIX", "session")
    PRINCIPAL_KEY_PREFIX = data.get("PRINCIPAL_KEY_PREFIX", "principal")
    SYMMETRIC_REVOKE = bool(data.get("SYMMETRIC_REVOKE", True))
    EXPOSE_AUTH_ERROR_CODES = bool(data.get("EXPOSE_AUTH_ERROR_CODES", False))
    ADMIN_ROLES = data.get("ADMIN_ROLES", "admin,owner")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")
