from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from poll_app.db.database import get_db
from poll_app.db.queries import find_voters
from poll_app.models.user import User
from poll_app.schemas.user import UserRead
from poll_app.api.endpoints.dependencies import get_current_user
from poll_app.api.responses import AUTH_ERROR_RESPONSE

router = APIRouter(prefix="/options", tags=["options"])


@router.get(
    "/{option_id}/voters",
    response_model=List[UserRead],
    summary="List who voted for an option",
    description="Votes are public. An unknown option simply has no voters.",
    responses={401: AUTH_ERROR_RESPONSE}
)
def get_voters(
    option_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return find_voters(db, option_id)
