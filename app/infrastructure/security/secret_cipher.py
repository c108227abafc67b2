"""Fernet encryption for password-share payloads.

The key is derived from server-held material (PASSWORD_SHARE_SECRET, else
SECRET_KEY) and ENCRYPTION_SALT; the handoff token never feeds the key.
"""

import base64

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from app.core.config import Settings, get_settings
from app.domain.exceptions import CredentialException

DECRYPTION_ERROR_MSG = "Failed to decrypt password share - invalid or corrupted data"
KDF_ITERATIONS = 100_000


def derive_fernet_key(secret: str, salt: str, iterations: int = KDF_ITERATIONS) -> bytes:
    """Derive a urlsafe-base64 32-byte Fernet key via PBKDF2-HMAC-SHA256."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt.encode("utf-8"),
        iterations=iterations,
    )
    return base64.urlsafe_b64encode(kdf.derive(secret.encode("utf-8")))


class FernetSecretCipher:
    """ISecretCipher backed by Fernet (AES-128-CBC + HMAC-SHA256, timestamped)."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self._fernet = Fernet(
            derive_fernet_key(
                settings.share_secret, settings.encryption_salt.get_secret_value()
            )
        )

    def encrypt(self, plaintext: str) -> str:
        """Encrypt plaintext to a string safe for storage."""
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a stored payload.

        Raises:
            CredentialException: Wrong key or corrupted payload.
        """
        try:
            return self._fernet.decrypt(ciphertext.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError) as e:
            raise CredentialException(DECRYPTION_ERROR_MSG) from e
