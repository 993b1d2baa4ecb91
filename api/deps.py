import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin.auth import InvalidIdTokenError, ExpiredIdTokenError

import core.firebase as firebase
from core.errors import RecordAccessError, RecordNotFoundError, StoreError
from services.record_store import RecordStore

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> dict:
    """
    Verifies the Firebase ID token sent as a Bearer token.
    No token at all: falls back to the local development user.
    Expired or invalid token: 401, so the frontend refreshes the session.
    """
    if not creds or not creds.credentials:
        return {"uid": "local-dev"}

    token = creds.credentials

    if firebase.auth_client is None:
        firebase.initialize_firebase()
        if firebase.auth_client is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Firebase not initialized"
            )

    try:
        return firebase.auth_client.verify_id_token(token, clock_skew_seconds=60)
    except (ExpiredIdTokenError, InvalidIdTokenError) as e:
        logger.info(f"Token validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token invalid or expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except Exception as e:
        logger.warning(f"Token validation error: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_store() -> RecordStore:
    return RecordStore()


def store_error_to_http(e: StoreError, action: str) -> HTTPException:
    if isinstance(e, RecordNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")
    if isinstance(e, RecordAccessError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No access to this record")
    logger.error(f"{action} failed: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{action} failed: {e}",
    )
