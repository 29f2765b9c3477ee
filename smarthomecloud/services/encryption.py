"""Sealing of camera feed URLs at rest.

Sealed values carry a ``fernet:`` marker so plaintext rows written before a
key was configured can be told apart without attempting a decrypt.
"""

from __future__ import annotations

from cryptography.fernet import Fernet

from smarthomecloud.config import get_settings

SEALED_PREFIX = "fernet:"


class EncryptionKeyMissing(RuntimeError):
    pass


def _get_fernet() -> Fernet:
    key = get_settings().fernet_key
    if not key:
        raise EncryptionKeyMissing(
            "FERNET_KEY is not set. Generate one with: "
            "python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\""
        )
    return Fernet(key.encode("utf-8"))


def has_key() -> bool:
    return bool(get_settings().fernet_key)


def is_sealed(value: str | None) -> bool:
    return bool(value) and value.startswith(SEALED_PREFIX)


def seal(plain: str) -> str:
    if not plain or is_sealed(plain):
        return plain
    token = _get_fernet().encrypt(plain.encode("utf-8")).decode("utf-8")
    return SEALED_PREFIX + token


def unseal(stored: str) -> str:
    """Plaintext for ``stored``. Unsealed values pass through unchanged."""
    if not is_sealed(stored):
        return stored
    token = stored[len(SEALED_PREFIX):]
    return _get_fernet().decrypt(token.encode("utf-8")).decode("utf-8")
