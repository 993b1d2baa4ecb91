# Pydantic models for the weekly report and the analytics view

import datetime

from pydantic import BaseModel

from core.money import Money
from models.alerts import CategorySpend


class GoalSnapshot(BaseModel):
    id: str
    title: str
    current_amount: Money
    target_amount: Money
    target_date: datetime.date
    progress: float


class WeeklyReport(BaseModel):
    period_start: datetime.date
    period_end: datetime.date
    total_income: Money
    total_expenses: Money
    savings: Money
    savings_rate: float
    category_ranking: list[CategorySpend]
    goals: list[GoalSnapshot]


class BreakdownItem(BaseModel):
    name: str
    amount: Money
    share: float


class AnalyticsSummary(BaseModel):
    range: str
    period_start: datetime.date | None = None
    period_end: datetime.date | None = None
    total_income: Money
    total_expenses: Money
    net_savings: Money
    expense_by_category: list[BreakdownItem]
    income_by_source: list[BreakdownItem]
