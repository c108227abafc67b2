"""Secret handoff entity (one-time encrypted delivery of a new password)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SecretHandoffEntity:
    """Stored handoff. Holds ciphertext only; the lookup token is kept as a digest."""

    id: str
    token_hash: str
    account_id: str
    recipient_email: str
    encrypted_payload: str
    expires_at: datetime
    used_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
