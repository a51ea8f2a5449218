"""
Reset Token Service

Raw tokens are 32 random bytes, hex encoded, and only ever leave the process
inside the reset email. The SHA-256 digest is the only form persisted.
"""

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class ResetToken:
    raw: str
    token_hash: str
    expires_at: datetime

    def __repr__(self) -> str:
        # Keep the raw value out of logs and tracebacks
        return f"ResetToken(token_hash={self.token_hash[:8]}..., expires_at={self.expires_at})"


class ResetTokenService:
    TOKEN_BYTES = 32

    def __init__(self, ttl: timedelta = timedelta(minutes=10)):
        self.ttl = ttl

    def hash(self, raw: str) -> str:
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

    def generate(self, now: datetime) -> ResetToken:
        raw = secrets.token_hex(self.TOKEN_BYTES)
        return ResetToken(raw=raw, token_hash=self.hash(raw), expires_at=now + self.ttl)

    def validate(
        self,
        raw: Optional[str],
        stored_hash: Optional[str],
        stored_expiry: Optional[datetime],
        now: datetime,
    ) -> bool:
        """True only if hash(raw) equals stored_hash and stored_expiry > now"""
        if not raw or not stored_hash or stored_expiry is None:
            return False
        matches = hmac.compare_digest(self.hash(raw), stored_hash)
        not_expired = stored_expiry > now
        return matches and not_expired
