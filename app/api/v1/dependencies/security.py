"""Crypto, code, and email dependencies (composition root).

Key derivation and settings parsing happen once per process; tests clear
the caches together with get_settings.
"""

from __future__ import annotations

from functools import lru_cache

from app.application.interfaces.services import (
    INotificationDispatcher,
    IPasswordHasher,
    ISecretCipher,
    ITokenSigner,
)
from app.application.services.one_time_code import OneTimeCodeService
from app.core.config import get_settings
from app.infrastructure.security import BcryptPasswordHasher, FernetSecretCipher, JwtTokenSigner
from app.infrastructure.services import EmailNotificationDispatcher, build_email_sender


def get_code_service() -> OneTimeCodeService:
    """One-time code generator/verifier with the configured length."""
    return OneTimeCodeService(length=get_settings().one_time_code_length)


def get_password_hasher() -> IPasswordHasher:
    return BcryptPasswordHasher()


@lru_cache
def get_token_signer() -> ITokenSigner:
    """Signer for bearer tokens and email ownership links."""
    return JwtTokenSigner(get_settings())


@lru_cache
def get_secret_cipher() -> ISecretCipher:
    """Cipher for password-share payloads (PBKDF2 runs once)."""
    return FernetSecretCipher(get_settings())


@lru_cache
def get_notification_dispatcher() -> INotificationDispatcher:
    """Consent emails over SMTP, or logged when SMTP_HOST is unset."""
    settings = get_settings()
    return EmailNotificationDispatcher(build_email_sender(settings), settings.frontend_url)


def clear_security_caches() -> None:
    """Drop cached signer, cipher, and dispatcher (after settings change in tests)."""
    get_token_signer.cache_clear()
    get_secret_cipher.cache_clear()
    get_notification_dispatcher.cache_clear()
