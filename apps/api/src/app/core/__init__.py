"""
Core module - Configuration, database, security, email and background jobs.
"""

from app.core.config import get_settings, settings
from app.core.database import Base, close_db, get_db, init_db
from app.core.encryption import EncryptionError, decrypt_password, encrypt_password
from app.core.redis import close_redis, get_redis_client, init_redis
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Encryption
    "EncryptionError",
    "encrypt_password",
    "decrypt_password",
    # Redis
    "get_redis_client",
    "init_redis",
    "close_redis",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
]
