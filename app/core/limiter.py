"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Central limit strings and decorators keep
rate limits DRY.
"""

import time
from threading import Lock

from fastapi import HTTPException
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

# Single source of truth for rate limit strings and decorators.
LOGIN_LIMIT = "10/minute"
CODE_ENTRY_LIMIT = "10/minute"
RESET_START_LIMIT = "5/minute"
LINK_OPEN_LIMIT = "30/minute"
RESET_PER_EMAIL_LIMIT = 3  # reset starts per target email per window
RESET_PER_EMAIL_WINDOW_SEC = 15 * 60

limit_auth = limiter.limit(LOGIN_LIMIT)
limit_codes = limiter.limit(CODE_ENTRY_LIMIT)
limit_reset = limiter.limit(RESET_START_LIMIT)
limit_links = limiter.limit(LINK_OPEN_LIMIT)

# In-memory sliding window per email for reset starts (each start emails the partner).
# Keys whose window has emptied are swept at most once per window.
_reset_per_email: dict[str, list[float]] = {}
_reset_per_email_lock = Lock()
_next_sweep_at = 0.0


def _sweep_expired(cutoff: float) -> None:
    """Drop emails with no start newer than cutoff. Caller holds the lock."""
    stale = [key for key, starts in _reset_per_email.items() if not starts or starts[-1] <= cutoff]
    for key in stale:
        del _reset_per_email[key]


def check_reset_rate_per_email(email: str, now: float | None = None) -> None:
    """Raise 429 if too many resets were started for this email in the window."""
    global _next_sweep_at
    key = (email or "").strip().lower()
    if not key:
        return
    now = time.monotonic() if now is None else now
    cutoff = now - RESET_PER_EMAIL_WINDOW_SEC
    with _reset_per_email_lock:
        if now >= _next_sweep_at:
            _sweep_expired(cutoff)
            _next_sweep_at = now + RESET_PER_EMAIL_WINDOW_SEC
        recent = [t for t in _reset_per_email.get(key, ()) if t > cutoff]
        if len(recent) >= RESET_PER_EMAIL_LIMIT:
            _reset_per_email[key] = recent
            raise HTTPException(
                status_code=429,
                detail="Too many reset requests for this email; try again later",
            )
        recent.append(now)
        _reset_per_email[key] = recent


def tracked_reset_emails() -> int:
    """Number of emails currently holding a reset window."""
    with _reset_per_email_lock:
        return len(_reset_per_email)


def reset_rate_windows() -> None:
    """Clear the per-email windows (tests)."""
    global _next_sweep_at
    with _reset_per_email_lock:
        _reset_per_email.clear()
        _next_sweep_at = 0.0
