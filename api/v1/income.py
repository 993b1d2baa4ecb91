from fastapi import APIRouter, Depends, status
from typing import List

from api.deps import get_current_user, get_store, store_error_to_http
from core.errors import StoreError
from models.income import IncomeCreate, IncomeInDB
from services import income_service
from services.record_store import RecordStore

router = APIRouter()


@router.get("/", response_model=List[IncomeInDB])
def get_all_income(
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    """
    All income records of the current user, newest first.
    """
    try:
        return income_service.list_income(store, current_user["uid"])
    except StoreError as e:
        raise store_error_to_http(e, "Reading income")


@router.post("/", response_model=IncomeInDB, status_code=status.HTTP_201_CREATED)
def create_income(
    income_data: IncomeCreate,
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    try:
        return income_service.create_income(store, current_user["uid"], income_data)
    except StoreError as e:
        raise store_error_to_http(e, "Adding income")


@router.delete("/{income_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_income(
    income_id: str,
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    try:
        income_service.delete_income(store, current_user["uid"], income_id)
    except StoreError as e:
        raise store_error_to_http(e, "Deleting income")
