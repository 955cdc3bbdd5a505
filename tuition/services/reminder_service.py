from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from urllib.parse import quote

from tuition.config import settings
from tuition.core.phone import whatsapp_number
from tuition.core.template_engine import template_engine
from tuition.store.read_models import FeeView


ENGLISH_REMINDER = (
    "Dear {{ parent_name }}, this is a reminder that {{ student_name }}'s tuition fee of "
    "{{ currency }}{{ amount }} is due on {{ due_date }}. "
    "Please make the payment at your earliest convenience. - {{ center_name }}"
)

TAMIL_REMINDER = (
    "அன்பு {{ parent_name }}, {{ student_name }} இன் பயிற்சி கட்டணம் "
    "{{ currency }}{{ amount }} {{ due_date }} அன்று செலுத்த வேண்டும் என்பதை நினைவூட்டுகிறோம். "
    "தயவுசெய்து விரைவில் கட்டணத்தை செலுத்தவும். - {{ center_name_ta }}"
)

# encodeURIComponent leaves these unescaped; wa.me expects the same encoding.
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class FeeReminder:
    fee_id: str
    phone: str
    message: str
    url: str


def format_amount(amount: Decimal) -> str:
    value = Decimal(amount)
    if value == value.to_integral_value():
        return str(value.quantize(Decimal('1')))
    return str(value.quantize(Decimal('0.01')))


def format_due_date(value: date) -> str:
    return value.strftime('%d/%m/%Y')


def format_reminder(
    fee: FeeView,
    *,
    center_name: str | None = None,
    center_name_ta: str | None = None,
    currency: str | None = None,
) -> str:
    context = {
        'parent_name': fee.parent_name,
        'student_name': fee.student_name,
        'amount': format_amount(fee.amount),
        'due_date': format_due_date(fee.due_date),
        'currency': settings.currency_symbol if currency is None else currency,
        'center_name': center_name or settings.center_name,
        'center_name_ta': center_name_ta or settings.center_name_ta,
    }
    english = template_engine.render(ENGLISH_REMINDER, context)
    tamil = template_engine.render(TAMIL_REMINDER, context)
    return f'{english}\n\n{tamil}'


def build_whatsapp_link(phone: str, message: str, *, base_url: str | None = None) -> str:
    digits = whatsapp_number(phone)
    base = (base_url or settings.whatsapp_base_url).rstrip('/')
    return f'{base}/{digits}?text={quote(message, safe=_URI_COMPONENT_SAFE)}'


def build_fee_reminder(fee: FeeView) -> FeeReminder:
    message = format_reminder(fee)
    return FeeReminder(
        fee_id=fee.id,
        phone=whatsapp_number(fee.parent_phone),
        message=message,
        url=build_whatsapp_link(fee.parent_phone, message),
    )
