"""
SMTP notification dispatcher built on fastapi-mail.

A fresh FastMail client is created for every attempt so a broken SMTP
connection is never reused across retries.
"""

import logging
from typing import Callable, Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from credential_service.app.services.notification_dispatcher import INotificationDispatcher
from credential_service.app.services.retry_policy import RetryPolicy
from credential_service.domain.errors import ErrorCode
from credential_service.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Password Reset Request"

RESET_EMAIL_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #2563eb;">Password Reset</h1>
  <p>You requested a password reset. Click the button below to reset your password:</p>
  <div style="text-align: center; margin: 30px 0;">
    <a href="{reset_url}"
       style="background-color: #2563eb; color: white; padding: 12px 24px;
              text-decoration: none; border-radius: 5px; display: inline-block;">
      Reset Password
    </a>
  </div>
  <p style="color: #666; font-size: 14px;">
    This link will expire in {ttl_minutes} minutes.<br>
    If you didn't request this, please ignore this email.
  </p>
</div>
"""


def build_connection_config(config) -> ConnectionConfig:
    return ConnectionConfig(
        MAIL_USERNAME=config.MAIL_USERNAME,
        MAIL_PASSWORD=config.MAIL_PASSWORD,
        MAIL_FROM=config.MAIL_FROM,
        MAIL_FROM_NAME=config.MAIL_FROM_NAME,
        MAIL_PORT=config.MAIL_PORT,
        MAIL_SERVER=config.MAIL_SERVER,
        MAIL_STARTTLS=config.MAIL_STARTTLS,
        MAIL_SSL_TLS=config.MAIL_SSL_TLS,
        USE_CREDENTIALS=bool(config.MAIL_USERNAME),
        VALIDATE_CERTS=config.MAIL_VALIDATE_CERTS,
        SUPPRESS_SEND=int(config.MAIL_SUPPRESS_SEND),
    )


def _send_timed_out() -> Error:
    return Error(ErrorCode.DISPATCH_ERROR, "Mail transport timed out")


class FastMailDispatcher(INotificationDispatcher):
    def __init__(
        self,
        connection_config: ConnectionConfig,
        frontend_url: str,
        ttl_minutes: int = 10,
        retry_policy: Optional[RetryPolicy] = None,
        mailer_factory: Callable[[ConnectionConfig], FastMail] = FastMail,
    ):
        self.connection_config = connection_config
        self.frontend_url = frontend_url.rstrip("/")
        self.ttl_minutes = ttl_minutes
        self.retry_policy = retry_policy or RetryPolicy(attempt_timeout=5.0)
        self._mailer_factory = mailer_factory

    def reset_url(self, raw_token: str) -> str:
        return f"{self.frontend_url}/reset-password/{raw_token}"

    def build_message(self, email: str, raw_token: str) -> MessageSchema:
        return MessageSchema(
            subject=RESET_EMAIL_SUBJECT,
            recipients=[email],
            body=RESET_EMAIL_TEMPLATE.format(
                reset_url=self.reset_url(raw_token), ttl_minutes=self.ttl_minutes
            ),
            subtype=MessageType.html,
        )

    async def send_reset_email(self, email: str, raw_token: str) -> Result[None]:
        message = self.build_message(email, raw_token)

        async def attempt() -> Result[None]:
            mailer = self._mailer_factory(self.connection_config)
            try:
                await mailer.send_message(message)
            except Exception as exc:
                # Every transport failure is worth another attempt
                logger.warning(f"Reset email to {email} failed: {type(exc).__name__}: {exc}")
                return Return.err(Error(ErrorCode.DISPATCH_ERROR, "Failed to send reset email"))
            return Return.ok(None)

        result = await self.retry_policy.run(
            "send_reset_email",
            attempt,
            is_retryable=lambda error: True,
            on_timeout=_send_timed_out,
        )
        if result.is_ok():
            logger.info(f"Reset email sent to {email}")
        return result
