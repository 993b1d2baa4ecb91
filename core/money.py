# Decimal money helpers: one parsing path for every amount in the app
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Annotated

from pydantic import PlainSerializer

from core.errors import ValidationError

CENT = Decimal("0.01")


def parse_amount(value) -> Decimal:
    """
    Parses a user- or store-supplied amount into a Decimal.

    Accepts Decimal, int, float or numeric text ("12.50", " 7 ").
    Raises ValidationError for empty, non-numeric, NaN or infinite input.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError("Amount is required")
    if isinstance(value, Decimal):
        amount = value
    else:
        text = str(value).strip()
        if not text:
            raise ValidationError("Amount is required")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise ValidationError(f"Amount is not a number: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"Amount is not a finite number: {value!r}")
    return amount


def to_money(value) -> Decimal:
    return parse_amount(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_storage(value: Decimal) -> str:
    # Firestore has no decimal type, amounts are kept as fixed-point strings
    return str(value.quantize(CENT, rounding=ROUND_HALF_UP))


# Decimal internally, plain JSON number on the wire
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]
