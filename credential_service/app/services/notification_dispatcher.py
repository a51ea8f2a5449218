from abc import ABC, abstractmethod

from credential_service.libs.result import Result


class INotificationDispatcher(ABC):
    """Outbound email for the password reset flow"""

    @abstractmethod
    async def send_reset_email(self, email: str, raw_token: str) -> Result[None]:
        """
        Deliver the reset link, retrying transport failures.

        Returns DISPATCH_ERROR once the retry budget is spent.
        """
        pass
