# Firestore-backed record store: the only place that talks to the database
import datetime
import logging

from google.cloud.firestore_v1.base_query import FieldFilter

from core.errors import RecordAccessError, RecordNotFoundError, StoreError
from core.firebase import ensure_initialized

logger = logging.getLogger(__name__)

INCOME = "income"
EXPENSES = "expenses"
GOALS = "goals"
NOTIFICATION_SETTINGS = "notification_settings"
ALERT_LOG = "alert_log"
WEEKLY_REPORTS = "weekly_reports"


def _iso(value):
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return value


class RecordStore:
    """
    insert / select_all / update / delete over user-owned collections.
    Dates are stored as ISO strings so range filters compare lexicographically.
    Every Firestore failure is re-raised as StoreError.
    """

    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        if self._db is None:
            self._db = ensure_initialized()
        return self._db

    def insert(self, collection: str, data: dict) -> str:
        payload = {k: _iso(v) for k, v in data.items()}
        try:
            _, doc_ref = self.db.collection(collection).add(payload)
        except Exception as e:
            raise StoreError(f"Failed to insert into {collection}: {e}") from e
        return doc_ref.id

    def select_all(
        self,
        collection: str,
        user_id: str,
        date_from: datetime.date | None = None,
        date_to: datetime.date | None = None,
        date_field: str = "date",
        order_by: str | None = "date",
        descending: bool = True,
    ) -> list[dict]:
        try:
            query = self.db.collection(collection).where(filter=FieldFilter("user_id", "==", user_id))
            if date_from is not None:
                query = query.where(filter=FieldFilter(date_field, ">=", date_from.isoformat()))
            if date_to is not None:
                query = query.where(filter=FieldFilter(date_field, "<=", date_to.isoformat()))

            rows = []
            for doc in query.stream():
                data = doc.to_dict()
                data["id"] = doc.id
                rows.append(data)
        except Exception as e:
            raise StoreError(f"Failed to read {collection}: {e}") from e

        # Sorted locally so the query needs no composite index with order_by
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by) or ""), reverse=descending)
        return rows

    def get_owned(self, collection: str, doc_id: str, user_id: str) -> dict:
        try:
            doc = self.db.collection(collection).document(doc_id).get()
        except Exception as e:
            raise StoreError(f"Failed to read {collection}/{doc_id}: {e}") from e
        if not doc.exists:
            raise RecordNotFoundError(f"{collection}/{doc_id} not found")
        data = doc.to_dict()
        if data.get("user_id") != user_id:
            raise RecordAccessError(f"{collection}/{doc_id} belongs to another user")
        data["id"] = doc.id
        return data

    def update(self, collection: str, doc_id: str, user_id: str, patch: dict) -> dict:
        current = self.get_owned(collection, doc_id, user_id)
        payload = {k: _iso(v) for k, v in patch.items()}
        try:
            self.db.collection(collection).document(doc_id).update(payload)
        except Exception as e:
            raise StoreError(f"Failed to update {collection}/{doc_id}: {e}") from e
        current.update(payload)
        return current

    def delete(self, collection: str, doc_id: str, user_id: str) -> None:
        self.get_owned(collection, doc_id, user_id)
        try:
            self.db.collection(collection).document(doc_id).delete()
        except Exception as e:
            raise StoreError(f"Failed to delete {collection}/{doc_id}: {e}") from e

    # --- Per-user singleton documents (document id == user id) ---

    def get_user_document(self, collection: str, user_id: str) -> dict | None:
        try:
            doc = self.db.collection(collection).document(user_id).get()
        except Exception as e:
            raise StoreError(f"Failed to read {collection}/{user_id}: {e}") from e
        return doc.to_dict() if doc.exists else None

    def set_user_document(self, collection: str, user_id: str, data: dict) -> None:
        payload = {k: _iso(v) for k, v in data.items()}
        payload["user_id"] = user_id
        try:
            self.db.collection(collection).document(user_id).set(payload)
        except Exception as e:
            raise StoreError(f"Failed to write {collection}/{user_id}: {e}") from e

    def list_documents(self, collection: str) -> list[dict]:
        try:
            rows = []
            for doc in self.db.collection(collection).stream():
                data = doc.to_dict()
                data["id"] = doc.id
                rows.append(data)
            return rows
        except Exception as e:
            raise StoreError(f"Failed to read {collection}: {e}") from e
