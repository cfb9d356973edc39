from __future__ import annotations

"""Order-created email notifications.

Delivery is best-effort: the lifecycle service logs and swallows
:class:`~api.app.errors.NotificationError` so a mail outage never fails an
order.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from ..errors import NotificationError
from ..utils.clock import utcnow

logger = logging.getLogger("notifications")


def format_rupiah(amount: int) -> str:
    """Return ``amount`` formatted like ``Rp 70.000``."""

    return "Rp " + f"{int(amount):,}".replace(",", ".")


def build_order_email(
    sender: str, recipient: str, order_id: str, table: str, total: int
) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = f"New Order: {order_id}"
    msg["From"] = sender
    msg["To"] = recipient
    msg.set_content(
        "New order received at Hapiyo Coffee!\n\n"
        f"Order ID: {order_id}\n"
        f"Table: {table}\n"
        f"Total: {format_rupiah(total)}\n"
        f"Time: {utcnow().isoformat(timespec='seconds')}\n\n"
        "Check admin panel for details.\n"
    )
    return msg


class OrderNotifier:
    """Send order-created emails through an SMTP relay."""

    def __init__(self, smtp_host: str | None, smtp_port: int = 25, sender: str = ""):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.sender = sender

    def _send(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=10) as server:
            server.send_message(msg)

    async def order_created(
        self, recipient: str | None, order_id: str, table: str, total: int
    ) -> bool:
        """Email ``recipient`` about a new order.

        Returns ``False`` when notifications are not configured. Raises
        :class:`NotificationError` when the relay rejects or is unreachable.
        """

        if not recipient or not self.smtp_host:
            logger.debug("order notification skipped for %s", order_id)
            return False
        msg = build_order_email(self.sender, recipient, order_id, table, total)
        try:
            await asyncio.to_thread(self._send, msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"failed to email {order_id}: {exc}") from exc
        logger.info("order notification sent for %s", order_id)
        return True


__all__ = ["OrderNotifier", "build_order_email", "format_rupiah"]
