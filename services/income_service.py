import datetime

from core.money import to_storage
from models.income import IncomeCreate, IncomeInDB
from services.record_store import INCOME, RecordStore


def list_income(store: RecordStore, user_id: str) -> list[IncomeInDB]:
    return [IncomeInDB(**row) for row in store.select_all(INCOME, user_id)]


def create_income(store: RecordStore, user_id: str, data: IncomeCreate, today: datetime.date | None = None) -> IncomeInDB:
    record = {
        "user_id": user_id,
        "amount": to_storage(data.amount),
        "source": data.source,
        "description": data.description,
        "date": (data.date or today or datetime.date.today()).isoformat(),
    }
    income_id = store.insert(INCOME, record)
    return IncomeInDB(id=income_id, **record)


def delete_income(store: RecordStore, user_id: str, income_id: str) -> None:
    store.delete(INCOME, income_id, user_id)
