"""One-time numeric codes: generation, slow salted hashing, and verification.

Only the bcrypt hash of a code is ever stored. Hashing and checking run in a
worker thread so the event loop is not blocked by bcrypt's cost.
"""

from __future__ import annotations

import asyncio
import secrets

import bcrypt

DEFAULT_CODE_LENGTH = 6
CODE_HASH_ROUNDS = 10  # bcrypt cost factor for code hashes


class OneTimeCodeService:
    """Generate and check short decimal codes (e.g. '048213')."""

    def __init__(self, length: int = DEFAULT_CODE_LENGTH, rounds: int = CODE_HASH_ROUNDS) -> None:
        self._length = length
        self._rounds = rounds

    @property
    def length(self) -> int:
        return self._length

    def generate(self, length: int | None = None) -> str:
        """Return a cryptographically random, zero-padded decimal code."""
        size = length or self._length
        return str(secrets.randbelow(10**size)).zfill(size)

    def _hash_sync(self, code: str) -> str:
        return bcrypt.hashpw(code.strip().encode("utf-8"), bcrypt.gensalt(self._rounds)).decode("utf-8")

    @staticmethod
    def _matches_sync(code: str, code_hash: str) -> bool:
        try:
            return bool(bcrypt.checkpw(code.strip().encode("utf-8"), code_hash.encode("utf-8")))
        except (ValueError, TypeError):
            return False

    async def hash(self, code: str) -> str:
        """Return bcrypt hash of code."""
        return await asyncio.to_thread(self._hash_sync, code)

    async def matches(self, code: str, code_hash: str) -> bool:
        """Return True if code matches code_hash. Malformed hashes never match."""
        if not code or not code_hash:
            return False
        return await asyncio.to_thread(self._matches_sync, code, code_hash)
