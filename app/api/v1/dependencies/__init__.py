"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, repositories, and the consent
protocol use cases. Routes depend only on these dependencies, not on
infrastructure directly.
"""

from app.api.v1.dependencies.consent import (
    CurrentAccount,
    get_account_deletion_service,
    get_authentication_service,
    get_current_account,
    get_email_verification_service,
    get_ownership_token_service,
    get_password_reset_service,
    get_secret_handoff_service,
)
from app.api.v1.dependencies.db import (
    get_account_repo,
    get_deletion_request_repo,
    get_password_reset_repo,
    get_secret_handoff_repo,
    get_uow,
)
from app.api.v1.dependencies.security import (
    clear_security_caches,
    get_code_service,
    get_notification_dispatcher,
    get_password_hasher,
    get_secret_cipher,
    get_token_signer,
)

__all__ = [
    "CurrentAccount",
    "clear_security_caches",
    "get_account_deletion_service",
    "get_account_repo",
    "get_authentication_service",
    "get_code_service",
    "get_current_account",
    "get_deletion_request_repo",
    "get_email_verification_service",
    "get_notification_dispatcher",
    "get_ownership_token_service",
    "get_password_hasher",
    "get_password_reset_repo",
    "get_secret_cipher",
    "get_secret_handoff_repo",
    "get_secret_handoff_service",
    "get_token_signer",
    "get_uow",
]
