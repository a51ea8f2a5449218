from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from credential_service.domain.errors import ErrorCode
from credential_service.libs.result import Error, Result, Return


class SessionIssuer:
    """Mints HS256 session tokens carrying only the identifier and timestamps"""

    ALGORITHM = "HS256"

    def __init__(self, secret: str, ttl: timedelta = timedelta(hours=24)):
        if not secret:
            raise ValueError("JWT secret must be configured")
        self._secret = secret
        self.ttl = ttl

    def issue(self, identifier: str, now: Optional[datetime] = None) -> str:
        """
        Generate a session token

        Args:
            identifier: Account email
            now: Issuance time (defaults to current UTC time)

        Returns:
            JWT token string (HS256)
        """
        now = now or datetime.now(UTC)
        payload = {
            "sub": identifier,
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.ALGORITHM)

    def verify(self, token: str) -> Result[dict]:
        """
        Verify and decode a session token

        Returns:
            Decoded payload, or EXPIRED_TOKEN / INVALID_TOKEN
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.ALGORITHM])
        except ExpiredSignatureError:
            return Return.err(Error(ErrorCode.EXPIRED_TOKEN, "Token has expired"))
        except JWTError:
            return Return.err(Error(ErrorCode.INVALID_TOKEN, "Invalid token"))

        if not payload.get("sub"):
            return Return.err(Error(ErrorCode.INVALID_TOKEN, "Invalid token"))
        return Return.ok(payload)
