# qr.py

"""QR codes that send a customer's phone to the menu for one table."""

from __future__ import annotations

import io
from urllib.parse import parse_qs, urlencode, urlparse

import qrcode

from .errors import ValidationError


def table_url(base_url: str, table: str) -> str:
    """Return the link encoded in ``table``'s QR code."""

    return f"{base_url.rstrip('/')}/?{urlencode({'table': table})}"


def render_table_qr(table: str, base_url: str) -> bytes:
    """Return a PNG QR code for ``table``.

    Parameters
    ----------
    table:
        Identifier printed on the physical table.
    base_url:
        Public address of the customer app. ``?table=<table>`` is appended.
    """

    img = qrcode.make(table_url(base_url, table))
    buf = io.BytesIO()
    img.save(buf)
    return buf.getvalue()


def resolve_table_code(code: str | None) -> str:
    """Return the table identifier from a scanned QR payload or typed number.

    Scanned payloads are URLs carrying a ``table`` query parameter. Manual
    entry accepts digits only.
    """

    text = (code or "").strip()
    if text.isdigit():
        return text
    parsed = urlparse(text)
    if parsed.scheme in ("http", "https"):
        values = parse_qs(parsed.query).get("table") or [""]
        table = values[0].strip()
        if table:
            return table
    raise ValidationError("Invalid table code")


__all__ = ["render_table_qr", "resolve_table_code", "table_url"]
