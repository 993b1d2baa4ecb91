from fastapi import APIRouter, Depends, status
from typing import Dict, List

from api.deps import get_current_user, get_store, store_error_to_http
from core.errors import StoreError
from core.money import Money
from models.category import CATEGORY_THRESHOLDS
from models.expense import ExpenseCreate, ExpenseCreated, ExpenseInDB
from services import expense_service
from services.record_store import RecordStore

router = APIRouter()


@router.get("/categories", response_model=Dict[str, Money])
def get_categories():
    """
    Expense categories with their large-expense thresholds, for the UI.
    """
    return CATEGORY_THRESHOLDS


@router.get("/", response_model=List[ExpenseInDB])
def get_all_expenses(
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    """
    All expenses of the current user, newest first, each flagged when over its category limit.
    """
    try:
        return expense_service.list_expenses(store, current_user["uid"])
    except StoreError as e:
        raise store_error_to_http(e, "Reading expenses")


@router.post("/", response_model=ExpenseCreated, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_data: ExpenseCreate,
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    """
    Records an expense, then checks the large-expense and monthly-budget alerts.
    Alert failures never undo the insert; they come back as `notice`.
    """
    try:
        return await expense_service.record_expense(store, current_user, expense_data)
    except StoreError as e:
        raise store_error_to_http(e, "Adding expense")


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense_id: str,
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    try:
        expense_service.delete_expense(store, current_user["uid"], expense_id)
    except StoreError as e:
        raise store_error_to_http(e, "Deleting expense")
