import datetime

from core.money import to_storage
from models.goal import GoalCreate, GoalInDB, GoalProgressUpdate, GoalView
from services.aggregation import days_remaining, goal_progress
from services.record_store import GOALS, RecordStore


def to_view(goal: GoalInDB, now: datetime.datetime) -> GoalView:
    return GoalView(
        **goal.model_dump(),
        progress=goal_progress(goal),
        days_remaining=days_remaining(goal.target_date, now),
    )


def list_goals(store: RecordStore, user_id: str, now: datetime.datetime | None = None) -> list[GoalView]:
    now = now or datetime.datetime.now()
    rows = store.select_all(GOALS, user_id, order_by="created_at")
    return [to_view(GoalInDB(**row), now) for row in rows]


def create_goal(store: RecordStore, user_id: str, data: GoalCreate, now: datetime.datetime | None = None) -> GoalView:
    now = now or datetime.datetime.now()
    record = {
        "user_id": user_id,
        "title": data.title,
        "target_amount": to_storage(data.target_amount),
        "current_amount": to_storage(data.current_amount),
        "target_date": data.target_date.isoformat(),
        "created_at": now.isoformat(),
    }
    goal_id = store.insert(GOALS, record)
    return to_view(GoalInDB(id=goal_id, **record), now)


def update_progress(
    store: RecordStore,
    user_id: str,
    goal_id: str,
    data: GoalProgressUpdate,
    now: datetime.datetime | None = None,
) -> GoalView:
    now = now or datetime.datetime.now()
    row = store.update(GOALS, goal_id, user_id, {"current_amount": to_storage(data.current_amount)})
    return to_view(GoalInDB(**row), now)


def delete_goal(store: RecordStore, user_id: str, goal_id: str) -> None:
    store.delete(GOALS, goal_id, user_id)
