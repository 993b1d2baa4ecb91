# Pure aggregation helpers over records already fetched from the store.
# Records may be store rows (dicts, amounts as text) or pydantic models.
import datetime
import logging
import math
from calendar import monthrange
from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal

from core.errors import ValidationError
from core.money import parse_amount
from models.alerts import CategorySpend
from models.transaction import Transaction

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def field(record, name: str, default=None):
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def amount_of(record) -> Decimal:
    """Amount of one record; unparsable amounts count as 0."""
    raw = field(record, "amount")
    try:
        return parse_amount(raw)
    except ValidationError:
        logger.warning(f"Unparsable amount {raw!r} in record {field(record, 'id')}, counting as 0")
        return ZERO


def date_of(record) -> datetime.date:
    value = field(record, "date")
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value)[:10])


def total_of(records: Iterable) -> Decimal:
    return sum((amount_of(r) for r in records), ZERO)


def group_sum_by(records: Iterable, key: Callable | str) -> dict[str, Decimal]:
    """
    Sums amounts per key. Keys keep the order in which they were first seen.
    `key` is either a callable or the name of a record field.
    """
    key_fn = key if callable(key) else (lambda r: field(r, key))
    totals: dict[str, Decimal] = {}
    for record in records:
        k = key_fn(record)
        totals[k] = totals.get(k, ZERO) + amount_of(record)
    return totals


def rank_categories(totals: Mapping[str, Decimal], limit: int | None = None) -> list[CategorySpend]:
    # sorted() is stable, ties keep first-seen order
    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return [CategorySpend(category=name, amount=amount) for name, amount in ranked]


def percentage_share(part, whole) -> Decimal:
    part = parse_amount(part)
    whole = parse_amount(whole)
    if whole == 0:
        return ZERO
    return part / whole * HUNDRED


def window_by_date(
    records: Iterable,
    date_from: datetime.date,
    date_to: datetime.date | None = None,
) -> list:
    """Records whose date lies in [date_from, date_to]; no upper bound when date_to is None."""
    result = []
    for record in records:
        d = date_of(record)
        if d < date_from:
            continue
        if date_to is not None and d > date_to:
            continue
        result.append(record)
    return result


def month_window(today: datetime.date) -> tuple[datetime.date, datetime.date]:
    """First and last calendar day of today's month (28/29/30/31 aware)."""
    last_day = monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def report_window(today: datetime.date) -> tuple[datetime.date, datetime.date]:
    """Trailing report window: today - 7 days through today, both inclusive."""
    return today - datetime.timedelta(days=7), today


def merge_transactions(incomes: Iterable, expenses: Iterable) -> list[Transaction]:
    """
    Tags incomes and expenses and returns them newest first.
    Equal dates keep concatenation order, so incomes precede expenses.
    """
    tagged: list[Transaction] = []
    for income in incomes:
        source = field(income, "source")
        tagged.append(Transaction(
            id=str(field(income, "id")),
            kind="income",
            amount=amount_of(income),
            date=date_of(income),
            title=f"Income: {source}",
            description=field(income, "description") or "Income",
            source=source,
        ))
    for expense in expenses:
        category = field(expense, "category")
        tagged.append(Transaction(
            id=str(field(expense, "id")),
            kind="expense",
            amount=amount_of(expense),
            date=date_of(expense),
            title=f"Expense: {category}",
            description=field(expense, "description") or "Expense",
            category=category,
        ))
    return sorted(tagged, key=lambda t: t.date, reverse=True)


def goal_progress(goal) -> float:
    target = parse_amount(field(goal, "target_amount"))
    current = parse_amount(field(goal, "current_amount", 0))
    if target <= 0:
        return 0.0
    share = current / target * HUNDRED
    return float(min(max(share, ZERO), HUNDRED))


def days_remaining(target_date: datetime.date, now: datetime.datetime | datetime.date) -> int:
    """Whole days until target_date, rounded up. Negative once the goal is overdue."""
    if not isinstance(now, datetime.datetime):
        now = datetime.datetime.combine(now, datetime.time.min)
    target = datetime.datetime.combine(target_date, datetime.time.min, tzinfo=now.tzinfo)
    return math.ceil((target - now).total_seconds() / 86400)
