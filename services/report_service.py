import datetime
from typing import Iterable

from core.money import parse_amount
from models.report import GoalSnapshot, WeeklyReport
from services.aggregation import (
    date_of,
    field,
    goal_progress,
    group_sum_by,
    percentage_share,
    rank_categories,
    report_window,
    total_of,
    window_by_date,
)
from services.record_store import EXPENSES, GOALS, INCOME, RecordStore


def goal_snapshot(goal) -> GoalSnapshot:
    return GoalSnapshot(
        id=str(field(goal, "id")),
        title=field(goal, "title"),
        current_amount=parse_amount(field(goal, "current_amount", 0)),
        target_amount=parse_amount(field(goal, "target_amount")),
        target_date=date_of({"date": field(goal, "target_date")}),
        progress=goal_progress(goal),
    )


def compose_weekly_report(
    incomes: Iterable,
    expenses: Iterable,
    goals: Iterable,
    today: datetime.date,
) -> WeeklyReport:
    """
    Weekly summary over the trailing 7-day window ending today.
    Goals are snapshotted as-is, they are never date filtered.
    """
    period_start, period_end = report_window(today)
    incomes = window_by_date(incomes, period_start, period_end)
    expenses = window_by_date(expenses, period_start, period_end)

    total_income = total_of(incomes)
    total_expenses = total_of(expenses)
    savings = total_income - total_expenses

    return WeeklyReport(
        period_start=period_start,
        period_end=period_end,
        total_income=total_income,
        total_expenses=total_expenses,
        savings=savings,
        savings_rate=float(percentage_share(savings, total_income)),
        category_ranking=rank_categories(group_sum_by(expenses, "category")),
        goals=[goal_snapshot(g) for g in goals],
    )


def build_weekly_report(store: RecordStore, user_id: str, today: datetime.date) -> WeeklyReport:
    period_start, period_end = report_window(today)
    incomes = store.select_all(INCOME, user_id, date_from=period_start, date_to=period_end)
    expenses = store.select_all(EXPENSES, user_id, date_from=period_start, date_to=period_end)
    goals = store.select_all(GOALS, user_id, order_by="created_at")
    return compose_weekly_report(incomes, expenses, goals, today)
