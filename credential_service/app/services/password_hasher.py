import bcrypt

from credential_service.domain.errors import ErrorCode
from credential_service.libs.result import Error, Result, Return

# bcrypt refuses (or silently truncates) anything past 72 bytes
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """
    bcrypt password hashing.

    Cost factor 12 takes a few hundred milliseconds on commodity hardware;
    callers run hash/verify in a worker thread.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        # Compared against when no account exists, so the miss costs a full verify
        self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))

    def hash(self, plaintext: str) -> str:
        return bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(self.rounds)).decode(
            "utf-8"
        )

    def verify(self, plaintext: str, hash_value: str) -> Result[bool]:
        """
        Ok(False) on mismatch; HASH_ERROR only when the stored hash is malformed.

        A password longer than MAX_PASSWORD_BYTES can never have been stored, so it
        is a mismatch after the same amount of bcrypt work as any other attempt.
        """
        if len(plaintext.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return Return.ok(self.dummy_verify(plaintext))
        try:
            matched = bcrypt.checkpw(plaintext.encode("utf-8"), hash_value.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return Return.err(Error(ErrorCode.HASH_ERROR, "Stored password hash is malformed"))
        return Return.ok(matched)

    def dummy_verify(self, plaintext: str) -> bool:
        bcrypt.checkpw(plaintext.encode("utf-8")[:MAX_PASSWORD_BYTES], self._dummy_hash)
        return False
