import smtplib

import pytest

from api.app.errors import NotificationError
from api.app.services.notifications import (
    OrderNotifier,
    build_order_email,
    format_rupiah,
)

pytestmark = pytest.mark.anyio


class FakeSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def send_message(self, msg):
        FakeSMTP.sent.append((self.host, self.port, msg))


class RefusingSMTP(FakeSMTP):
    def send_message(self, msg):
        raise smtplib.SMTPRecipientsRefused({msg["To"]: (550, b"no such user")})


@pytest.mark.parametrize(
    "amount,text",
    [(70000, "Rp 70.000"), (0, "Rp 0"), (1250000, "Rp 1.250.000")],
)
def test_format_rupiah(amount, text):
    assert format_rupiah(amount) == text


def test_email_lists_order_table_and_total():
    msg = build_order_email("orders@hapiyo.local", "bar@hapiyo.id", "HPY-1", "5", 70000)
    body = msg.get_content()
    assert msg["Subject"] == "New Order: HPY-1"
    assert msg["To"] == "bar@hapiyo.id"
    assert "Table: 5" in body
    assert "Total: Rp 70.000" in body


async def test_skipped_when_unconfigured(monkeypatch):
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    FakeSMTP.sent = []

    assert await OrderNotifier(None).order_created("bar@hapiyo.id", "HPY-1", "5", 1) is False
    assert await OrderNotifier("mail.test").order_created(None, "HPY-1", "5", 1) is False
    assert FakeSMTP.sent == []


async def test_sends_through_relay(monkeypatch):
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    FakeSMTP.sent = []
    notifier = OrderNotifier("mail.test", 2525, "orders@hapiyo.local")

    assert await notifier.order_created("bar@hapiyo.id", "HPY-1", "5", 70000) is True

    host, port, msg = FakeSMTP.sent[0]
    assert (host, port) == ("mail.test", 2525)
    assert msg["From"] == "orders@hapiyo.local"


async def test_relay_failure_raises_notification_error(monkeypatch):
    monkeypatch.setattr(smtplib, "SMTP", RefusingSMTP)
    notifier = OrderNotifier("mail.test")

    with pytest.raises(NotificationError, match="HPY-1"):
        await notifier.order_created("bar@hapiyo.id", "HPY-1", "5", 70000)


async def test_unreachable_relay_raises_notification_error(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    with pytest.raises(NotificationError):
        await OrderNotifier("mail.test").order_created("bar@hapiyo.id", "HPY-1", "5", 1)
