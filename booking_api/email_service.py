"""
Email Service using an SMTP relay
Sends the booking confirmation email; one fresh SMTP session per message
"""

import logging
import smtplib
import ssl
from email.errors import MessageError
from email.mime.text import MIMEText

from .config import Settings
from .email_templates import event_confirmation_subject, event_confirmation_template
from .exceptions import ConfigurationError, MailProviderError
from .schemas import MailNotification

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 30


class MailGateway:
    """Mail-relay account shared by all requests. Credentials are fixed at startup."""

    def __init__(
        self,
        user: str,
        password: str,
        meeting_link: str,
        host: str = "smtp.gmail.com",
        port: int = 587,
    ):
        self.user = user
        self._password = password
        self.meeting_link = meeting_link
        self.host = host
        self.port = port

    @classmethod
    def from_settings(cls, settings: Settings) -> "MailGateway":
        return cls(
            user=settings.email_user,
            password=settings.email_password,
            meeting_link=settings.meeting_link,
            host=settings.smtp_host,
            port=settings.smtp_port,
        )

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        if self.port == 465:
            server = smtplib.SMTP_SSL(
                self.host, self.port, context=context, timeout=SMTP_TIMEOUT_SECONDS
            )
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=SMTP_TIMEOUT_SECONDS)

        try:
            if self.port != 465:
                server.starttls(context=context)
            server.login(self.user, self._password)
        except BaseException:
            server.close()
            raise
        return server

    def verify(self) -> None:
        """
        Log in to the relay once so bad credentials stop the process at startup.

        Raises:
            ConfigurationError: If the relay refuses the connection or the login
        """
        try:
            server = self._connect()
            server.quit()
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"❌ SMTP auth error: {e}")
            raise ConfigurationError(
                f"Mail relay rejected credentials for {self.user}"
            ) from e
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"❌ SMTP connect error: {e}")
            raise ConfigurationError(
                f"Could not connect to mail relay {self.host}:{self.port}: {e}"
            ) from e

        logger.info(f"✅ Mail relay login verified for {self.user} via {self.host}")

    def build_message(self, notification: MailNotification) -> MIMEText:
        body = event_confirmation_template(
            event_name=notification.event_name,
            meeting_link=self.meeting_link,
            date=notification.date,
            time_range=notification.time_range,
            description=notification.description,
        )

        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = event_confirmation_subject(notification.event_name)
        msg["From"] = self.user
        msg["To"] = notification.to
        return msg

    def send_notification(self, notification: MailNotification) -> None:
        """
        Send one confirmation email. Not retried.

        Raises:
            MailProviderError: If the relay rejects the message or the network fails
        """
        try:
            message = self.build_message(notification).as_string()
        except (MessageError, ValueError) as e:
            logger.error("❌ Could not build email: %s", {"message": str(e), "to": notification.to})
            raise MailProviderError(f"Invalid message headers: {e}") from e

        try:
            server = self._connect()
            try:
                server.sendmail(self.user, [notification.to], message)
            finally:
                server.quit()
        except smtplib.SMTPResponseException as e:
            response = e.smtp_error
            if isinstance(response, bytes):
                response = response.decode(errors="replace")
            logger.error(
                "❌ Error sending email: %s",
                {"message": str(e), "code": e.smtp_code, "response": response},
            )
            raise MailProviderError(str(e), code=e.smtp_code) from e
        except (smtplib.SMTPException, OSError) as e:
            logger.error("❌ Error sending email: %s", {"message": str(e), "code": None})
            raise MailProviderError(str(e)) from e

        logger.info(f"✅ Confirmation email sent to {notification.to} via {self.host}")
