from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from poll_app.core.config import Settings, get_settings
from poll_app.core.constants import ErrorMessages
from poll_app.core.exception import UnauthorizedError
from poll_app.core.security import decode_access_token
from poll_app.db.database import get_db
from poll_app.db.queries import find_user_by_id
from poll_app.models.user import User

# auto_error is off so a missing header gets our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> User:
    """Get the current user from the database.
    Any endpoint that requires authentication can use this dependency.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(ErrorMessages.AUTH_HEADER_REQUIRED)

    user_id = decode_access_token(credentials.credentials, settings.jwt_secret)
    if user_id is None:
        raise UnauthorizedError(ErrorMessages.INVALID_TOKEN)

    user = find_user_by_id(db, user_id)
    if user is None:
        raise UnauthorizedError(ErrorMessages.USER_NOT_FOUND)

    return user
