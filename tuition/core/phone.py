from __future__ import annotations

from tuition.core.errors import SyncValidationError


def whatsapp_number(phone: str | None) -> str:
    """Guardian phone as the bare digit string a ``wa.me`` link expects.

    Spaces, ``+``, dashes and brackets are dropped; no country code is added.
    """
    digits = ''.join(ch for ch in str(phone or '') if ch.isdigit())
    if not digits:
        raise SyncValidationError('Guardian phone number has no digits')
    return digits
