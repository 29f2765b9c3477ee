import pytest
from cryptography.fernet import Fernet

from smarthomecloud.config import Settings
from smarthomecloud.models.encrypted_type import SealedURL
from smarthomecloud.services import encryption


@pytest.fixture
def with_key(monkeypatch):
    settings = Settings(fernet_key=Fernet.generate_key().decode())
    monkeypatch.setattr(encryption, "get_settings", lambda: settings)


@pytest.fixture
def without_key(monkeypatch):
    settings = Settings(fernet_key="")
    monkeypatch.setattr(encryption, "get_settings", lambda: settings)


def test_seal_and_unseal(with_key):
    sealed = encryption.seal("rtsp://admin:pw@cam.local/stream")
    assert encryption.is_sealed(sealed)
    assert "admin:pw" not in sealed
    assert encryption.unseal(sealed) == "rtsp://admin:pw@cam.local/stream"


def test_seal_is_idempotent(with_key):
    sealed = encryption.seal("rtsp://cam/1")
    assert encryption.seal(sealed) == sealed


def test_unsealed_value_passes_through(without_key):
    assert encryption.unseal("rtsp://cam/1") == "rtsp://cam/1"


def test_seal_without_key_raises(without_key):
    with pytest.raises(encryption.EncryptionKeyMissing):
        encryption.seal("rtsp://cam/1")


def test_column_type_stores_plaintext_without_key(without_key):
    column = SealedURL(1000)
    assert column.process_bind_param("rtsp://cam/1", None) == "rtsp://cam/1"
    assert column.process_result_value("rtsp://cam/1", None) == "rtsp://cam/1"


def test_column_type_seals_with_key(with_key):
    column = SealedURL(1000)
    stored = column.process_bind_param("rtsp://cam/1", None)
    assert stored.startswith(encryption.SEALED_PREFIX)
    assert column.process_result_value(stored, None) == "rtsp://cam/1"
