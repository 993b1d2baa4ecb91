from fastapi import APIRouter, Depends, status
from typing import List

from api.deps import get_current_user, get_store, store_error_to_http
from core.errors import StoreError
from models.goal import GoalCreate, GoalProgressUpdate, GoalView
from services import goal_service
from services.record_store import RecordStore

router = APIRouter()


@router.get("/", response_model=List[GoalView])
def get_goals(
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    try:
        return goal_service.list_goals(store, current_user["uid"])
    except StoreError as e:
        raise store_error_to_http(e, "Reading goals")


@router.post("/", response_model=GoalView, status_code=status.HTTP_201_CREATED)
def create_goal(
    goal_data: GoalCreate,
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    try:
        return goal_service.create_goal(store, current_user["uid"], goal_data)
    except StoreError as e:
        raise store_error_to_http(e, "Adding goal")


@router.patch("/{goal_id}/progress", response_model=GoalView)
def update_goal_progress(
    goal_id: str,
    progress: GoalProgressUpdate,
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    """
    Sets how much has been saved towards the goal so far.
    """
    try:
        return goal_service.update_progress(store, current_user["uid"], goal_id, progress)
    except StoreError as e:
        raise store_error_to_http(e, "Updating goal")


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(
    goal_id: str,
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    try:
        goal_service.delete_goal(store, current_user["uid"], goal_id)
    except StoreError as e:
        raise store_error_to_http(e, "Deleting goal")
