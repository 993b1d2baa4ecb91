import datetime
from typing import Iterable, Literal

from models.report import AnalyticsSummary, BreakdownItem
from services.aggregation import group_sum_by, month_window, percentage_share, report_window, total_of, window_by_date

TimeRange = Literal["all", "month", "week"]


def _breakdown(totals: dict, whole) -> list[BreakdownItem]:
    return [
        BreakdownItem(name=name, amount=amount, share=float(percentage_share(amount, whole)))
        for name, amount in totals.items()
    ]


def period_for(time_range: TimeRange, today: datetime.date) -> tuple[datetime.date | None, datetime.date | None]:
    if time_range == "month":
        return month_window(today)
    if time_range == "week":
        return report_window(today)
    return None, None


def summarize(
    incomes: Iterable,
    expenses: Iterable,
    time_range: TimeRange = "all",
    today: datetime.date | None = None,
) -> AnalyticsSummary:
    today = today or datetime.date.today()
    start, end = period_for(time_range, today)
    if start is not None:
        incomes = window_by_date(incomes, start, end)
        expenses = window_by_date(expenses, start, end)
    else:
        incomes, expenses = list(incomes), list(expenses)

    total_income = total_of(incomes)
    total_expenses = total_of(expenses)
    return AnalyticsSummary(
        range=time_range,
        period_start=start,
        period_end=end,
        total_income=total_income,
        total_expenses=total_expenses,
        net_savings=total_income - total_expenses,
        expense_by_category=_breakdown(group_sum_by(expenses, "category"), total_expenses),
        income_by_source=_breakdown(group_sum_by(incomes, "source"), total_income),
    )
