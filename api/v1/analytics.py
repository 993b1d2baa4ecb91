from fastapi import APIRouter, Depends, Query

from api.deps import get_current_user, get_store, store_error_to_http
from core.errors import StoreError
from models.report import AnalyticsSummary
from services import analytics_service
from services.analytics_service import TimeRange
from services.record_store import EXPENSES, INCOME, RecordStore

router = APIRouter()


@router.get("/", response_model=AnalyticsSummary)
def get_analytics(
    time_range: TimeRange = Query("all", alias="range"),
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    """
    Totals, net savings, expense-by-category and income-by-source breakdowns.
    """
    user_id = current_user["uid"]
    try:
        incomes = store.select_all(INCOME, user_id)
        expenses = store.select_all(EXPENSES, user_id)
    except StoreError as e:
        raise store_error_to_http(e, "Reading analytics data")
    return analytics_service.summarize(incomes, expenses, time_range)
