"""Security: token signing, password hashing, and secret encryption."""

from app.infrastructure.security.jwt import JwtTokenSigner
from app.infrastructure.security.password import (
    BcryptPasswordHasher,
    get_password_hash,
    verify_password,
)
from app.infrastructure.security.secret_cipher import FernetSecretCipher

__all__ = [
    "BcryptPasswordHasher",
    "FernetSecretCipher",
    "JwtTokenSigner",
    "get_password_hash",
    "verify_password",
]
