import datetime
from typing import Literal

from pydantic import BaseModel

from core.money import Money


class Transaction(BaseModel):
    id: str
    kind: Literal["income", "expense"]
    amount: Money
    date: datetime.date
    title: str
    description: str
    source: str | None = None
    category: str | None = None
