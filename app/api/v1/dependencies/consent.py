"""Consent protocol service dependencies and the bearer-token account (composition root).

Routes depend only on these; lifetimes come from settings.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.v1.dependencies.db import (
    get_account_repo,
    get_deletion_request_repo,
    get_password_reset_repo,
    get_secret_handoff_repo,
    get_uow,
)
from app.api.v1.dependencies.security import (
    get_code_service,
    get_notification_dispatcher,
    get_password_hasher,
    get_secret_cipher,
    get_token_signer,
)
from app.application.interfaces.repositories import (
    IAccountRepository,
    IDeletionRequestRepository,
    IPasswordResetRequestRepository,
    ISecretHandoffRepository,
    IUnitOfWork,
)
from app.application.interfaces.services import (
    INotificationDispatcher,
    IPasswordHasher,
    ISecretCipher,
    ITokenSigner,
)
from app.application.services.authentication_service import AuthenticationService
from app.application.services.one_time_code import OneTimeCodeService
from app.application.services.ownership_token_service import OwnershipTokenService
from app.application.services.secret_handoff_service import SecretHandoffService
from app.application.use_cases.account_deletion import AccountDeletionService
from app.application.use_cases.email_verification import EmailVerificationService
from app.application.use_cases.password_reset import PasswordResetService
from app.core.config import get_settings
from app.domain.entities import AccountEntity
from app.domain.exceptions import AuthenticationException

security = HTTPBearer(auto_error=False)

AccountRepo = Annotated[IAccountRepository, Depends(get_account_repo)]
UnitOfWork = Annotated[IUnitOfWork, Depends(get_uow)]
Notifier = Annotated[INotificationDispatcher, Depends(get_notification_dispatcher)]
Codes = Annotated[OneTimeCodeService, Depends(get_code_service)]
Signer = Annotated[ITokenSigner, Depends(get_token_signer)]
Hasher = Annotated[IPasswordHasher, Depends(get_password_hasher)]


def get_secret_handoff_service(
    repo: Annotated[ISecretHandoffRepository, Depends(get_secret_handoff_repo)],
    cipher: Annotated[ISecretCipher, Depends(get_secret_cipher)],
    uow: UnitOfWork,
) -> SecretHandoffService:
    return SecretHandoffService(
        repo, cipher, uow, ttl_minutes=get_settings().password_share_expire_minutes
    )


def get_ownership_token_service(
    signer: Signer,
    accounts: AccountRepo,
    uow: UnitOfWork,
) -> OwnershipTokenService:
    return OwnershipTokenService(
        signer, accounts, uow, ttl_hours=get_settings().email_verification_expire_hours
    )


def get_password_reset_service(
    accounts: AccountRepo,
    requests: Annotated[IPasswordResetRequestRepository, Depends(get_password_reset_repo)],
    uow: UnitOfWork,
    codes: Codes,
    hasher: Hasher,
    notifier: Notifier,
    handoff: Annotated[SecretHandoffService, Depends(get_secret_handoff_service)],
) -> PasswordResetService:
    """Password reset use case over the request session."""
    settings = get_settings()
    return PasswordResetService(
        accounts,
        requests,
        uow,
        codes,
        hasher,
        notifier,
        handoff,
        code_ttl_minutes=settings.password_reset_code_expire_minutes,
        link_ttl_minutes=settings.password_reset_link_expire_minutes,
    )


def get_account_deletion_service(
    accounts: AccountRepo,
    requests: Annotated[IDeletionRequestRepository, Depends(get_deletion_request_repo)],
    uow: UnitOfWork,
    codes: Codes,
    notifier: Notifier,
) -> AccountDeletionService:
    """Account deletion use case over the request session."""
    return AccountDeletionService(
        accounts,
        requests,
        uow,
        codes,
        notifier,
        code_ttl_minutes=get_settings().deletion_code_expire_minutes,
    )


def get_email_verification_service(
    accounts: AccountRepo,
    tokens: Annotated[OwnershipTokenService, Depends(get_ownership_token_service)],
    notifier: Notifier,
) -> EmailVerificationService:
    return EmailVerificationService(accounts, tokens, notifier)


def get_authentication_service(
    accounts: AccountRepo,
    hasher: Hasher,
    signer: Signer,
) -> AuthenticationService:
    return AuthenticationService(
        accounts,
        hasher,
        signer,
        access_token_ttl_minutes=get_settings().access_token_expire_minutes,
    )


async def get_current_account(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth: Annotated[AuthenticationService, Depends(get_authentication_service)],
) -> AccountEntity:
    """Resolve the bearer token to its account.

    Raises AuthenticationException (401) when the header is missing or the
    token does not validate.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Not authenticated")
    return await auth.authenticate_token(credentials.credentials)


CurrentAccount = Annotated[AccountEntity, Depends(get_current_account)]
