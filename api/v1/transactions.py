from fastapi import APIRouter, Depends
from typing import List

from api.deps import get_current_user, get_store, store_error_to_http
from core.errors import StoreError
from models.transaction import Transaction
from services.aggregation import merge_transactions
from services.record_store import EXPENSES, INCOME, RecordStore

router = APIRouter()


@router.get("/", response_model=List[Transaction])
def get_transactions(
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    """
    Income and expenses in one chronological list, newest first.
    """
    user_id = current_user["uid"]
    try:
        incomes = store.select_all(INCOME, user_id)
        expenses = store.select_all(EXPENSES, user_id)
    except StoreError as e:
        raise store_error_to_http(e, "Reading transactions")
    return merge_transactions(incomes, expenses)
