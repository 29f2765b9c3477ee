"""Column type for feed URLs, sealed with Fernet when a key is configured."""

from __future__ import annotations

from sqlalchemy import String, TypeDecorator


class SealedURL(TypeDecorator):
    """Seals on write when FERNET_KEY is set; rows without the marker read back as-is.

    A sealed row read without a key raises EncryptionKeyMissing rather than
    leaking ciphertext to clients.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        from smarthomecloud.services import encryption

        if not value or not encryption.has_key():
            return value
        return encryption.seal(value)

    def process_result_value(self, value, dialect):
        from smarthomecloud.services import encryption

        if not value:
            return value
        return encryption.unseal(value)
