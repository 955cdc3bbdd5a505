from datetime import date
from decimal import Decimal
from urllib.parse import parse_qs, urlparse

import pytest

from tuition.core.errors import SyncValidationError
from tuition.services.reminder_service import build_fee_reminder, build_whatsapp_link, format_amount, format_reminder
from tuition.store.read_models import FeeView


def _fee(**overrides) -> FeeView:
    values = {
        'id': 'fee-1',
        'student_id': 'student-1',
        'amount': Decimal('1250.00'),
        'due_date': date(2026, 11, 5),
        'status': 'not_paid',
        'paid_date': None,
        'student_name': 'Priya',
        'parent_name': 'Kumar',
        'parent_phone': '+91 98400-12345',
    }
    values.update(overrides)
    return FeeView(**values)


def test_reminder_has_english_then_tamil_paragraph():
    message = format_reminder(_fee(), center_name='Star Tuition', center_name_ta='ஸ்டார் பயிற்சி')
    english, tamil = message.split('\n\n')
    assert english == (
        "Dear Kumar, this is a reminder that Priya's tuition fee of ₹1250 is due on 05/11/2026. "
        'Please make the payment at your earliest convenience. - Star Tuition'
    )
    assert tamil.startswith('அன்பு Kumar, Priya இன் பயிற்சி கட்டணம் ₹1250 05/11/2026')
    assert tamil.endswith('- ஸ்டார் பயிற்சி')


def test_reminder_is_deterministic():
    assert format_reminder(_fee()) == format_reminder(_fee())


def test_amount_formatting_keeps_paise_only_when_present():
    assert format_amount(Decimal('500.00')) == '500'
    assert format_amount(Decimal('500.5')) == '500.50'
    assert format_amount(Decimal('0')) == '0'


def test_whatsapp_link_strips_non_digits_and_encodes_text():
    url = build_whatsapp_link('(+91) 98400 12345', "Hi & welcome, it's due", base_url='https://wa.me/')
    parsed = urlparse(url)
    assert parsed.netloc == 'wa.me'
    assert parsed.path == '/919840012345'
    assert parse_qs(parsed.query)['text'] == ["Hi & welcome, it's due"]
    assert "it's" in url


def test_whatsapp_link_requires_digits():
    with pytest.raises(SyncValidationError):
        build_whatsapp_link('n/a', 'hello')


def test_build_fee_reminder_bundles_phone_message_and_url():
    reminder = build_fee_reminder(_fee())
    assert reminder.phone == '919840012345'
    assert reminder.fee_id == 'fee-1'
    assert reminder.url.startswith('https://wa.me/919840012345?text=')
    assert 'Priya' in reminder.message
