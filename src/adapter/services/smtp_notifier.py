"""
SMTP Notifier - delivers plain-text email through a configured SMTP relay.
"""

import asyncio
import logging
import smtplib
from email.mime.text import MIMEText

from src.libs.result import Error, Result, Return
from src.app.services.notifier import Notifier

logger = logging.getLogger(__name__)


class SmtpNotifier(Notifier):
    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    async def send(self, to: str, subject: str, body: str) -> Result[None]:
        msg = MIMEText(body, "plain", "utf-8")
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject

        try:
            # smtplib blocks; keep it off the event loop
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email via {self.host}:{self.port}: {e}")
            return Return.err(Error("DELIVERY_ERROR", f"SMTP delivery failed: {e}"))

        logger.info(f"Email sent to {to}")
        return Return.ok(None)

    def _deliver(self, msg: MIMEText) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.send_message(msg)
