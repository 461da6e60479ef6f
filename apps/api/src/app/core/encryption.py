"""
Secret Encryption

AES-256-CBC encryption for SMTP passwords stored in the database.

Format: ``<iv hex>:<ciphertext hex>`` with a random 16-byte IV per value.
The key is derived from EMAIL_ENCRYPTION_KEY with scrypt (fixed salt, so the
same key always decrypts previously stored values).
"""

import logging
import os
from functools import lru_cache

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from app.core.config import settings

logger = logging.getLogger(__name__)

KEY_SALT = b"salt"
KEY_LENGTH = 32
IV_LENGTH = 16


class EncryptionError(Exception):
    """Raised when a value cannot be encrypted or decrypted."""


@lru_cache(maxsize=4)
def _derive_key(secret: str) -> bytes:
    kdf = Scrypt(salt=KEY_SALT, length=KEY_LENGTH, n=2**14, r=8, p=1)
    return kdf.derive(secret.encode("utf-8"))


def encrypt_password(password: str, secret: str | None = None) -> str:
    """
    Encrypt a password for storage.

    Args:
        password: Plain text password
        secret: Encryption secret (defaults to settings.email_encryption_key)

    Returns:
        ``ivhex:cipherhex`` string
    """
    key = _derive_key(secret or settings.email_encryption_key)
    iv = os.urandom(IV_LENGTH)

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(password.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    return f"{iv.hex()}:{ciphertext.hex()}"


def decrypt_password(encrypted: str, secret: str | None = None) -> str:
    """
    Decrypt a value produced by encrypt_password.

    Raises:
        EncryptionError: If the value is malformed or the key is wrong
    """
    iv_hex, _, cipher_hex = (encrypted or "").partition(":")
    if not iv_hex or not cipher_hex:
        raise EncryptionError("Invalid encrypted password format")

    try:
        iv = bytes.fromhex(iv_hex)
        ciphertext = bytes.fromhex(cipher_hex)
        if len(iv) != IV_LENGTH:
            raise EncryptionError("Invalid initialization vector")

        key = _derive_key(secret or settings.email_encryption_key)
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        plain = unpadder.update(padded) + unpadder.finalize()
        return plain.decode("utf-8")
    except EncryptionError:
        raise
    except ValueError as e:
        logger.error("Failed to decrypt stored password")
        raise EncryptionError("Failed to decrypt email password") from e


__all__ = ["EncryptionError", "encrypt_password", "decrypt_password"]
