from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
import logging

from poll_app.db.database import get_db
from poll_app.db.queries import find_user_by_email
from poll_app.models.user import User
from poll_app.schemas.user import SignupRequest, LoginRequest, AuthResponse, UserRead
from poll_app.core.config import Settings, get_settings
from poll_app.core.security import verify_password, create_access_token, hash_password
from poll_app.core.constants import ErrorMessages
from poll_app.core.exception import ConflictError, StorageError, UnauthorizedError
from poll_app.api.endpoints.dependencies import get_current_user
from poll_app.api.responses import AUTH_ERROR_RESPONSE, get_signup_responses, get_login_responses

# Setup logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User, settings: Settings) -> AuthResponse:
    token = create_access_token(user.id, settings.jwt_secret)
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED, responses=get_signup_responses())
def signup(
    signup_data: SignupRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Create an account and return a bearer token for it.

    Username and email must both be unused.
    """
    logger.info(f"Signup attempt for email: {signup_data.email}, username: {signup_data.username}")

    db_user = User(
        username=signup_data.username,
        email=str(signup_data.email),
        hashed_password=hash_password(signup_data.password),
    )

    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    except IntegrityError as e:
        # Unique index on username or email
        db.rollback()
        logger.warning(f"Signup failed, duplicate username or email: {e.orig}")
        raise ConflictError(ErrorMessages.DUPLICATE_USER)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error during signup: {str(e)}")
        raise StorageError() from e

    logger.info(f"User registered successfully: ID {db_user.id}, email: {db_user.email}")
    return _auth_response(db_user, settings)


@router.post("/login", response_model=AuthResponse, responses=get_login_responses())
def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Exchange email and password for a bearer token."""
    user = find_user_by_email(db, login_data.email)

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning(f"Failed login attempt for email: {login_data.email}")
        raise UnauthorizedError(ErrorMessages.INVALID_CREDENTIALS)

    logger.info(f"Login successful for user: {user.id}")
    return _auth_response(user, settings)


@router.get("/me", response_model=UserRead, responses={401: AUTH_ERROR_RESPONSE})
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
