from datetime import datetime, timedelta, timezone
from typing import Optional
from passlib.context import CryptContext
from jose import JWTError, jwt
import bcrypt

from poll_app.core.constants import AuthConfig

ALGORITHM = AuthConfig.ALGORITHM
ACCESS_TOKEN_EXPIRE = timedelta(hours=AuthConfig.ACCESS_TOKEN_EXPIRE_HOURS)

# Configure password context with explicit bcrypt settings
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=AuthConfig.BCRYPT_ROUNDS,
    bcrypt__default_ident="2b"
)


def _truncate(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > AuthConfig.BCRYPT_MAX_PASSWORD_BYTES:
        password = password_bytes[:AuthConfig.BCRYPT_MAX_PASSWORD_BYTES].decode('utf-8', errors='ignore')
    return password


# Password hashing
def verify_password(plain_password: str, hashed_password: str) -> bool:
    plain_password = _truncate(plain_password)
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, AttributeError):
        # Newer bcrypt releases break passlib's backend probe; check the hash directly
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def hash_password(password: str) -> str:
    password = _truncate(password)
    try:
        return pwd_context.hash(password)
    except (ValueError, AttributeError):
        salt = bcrypt.gensalt(rounds=AuthConfig.BCRYPT_ROUNDS)
        return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


# JWT token creation and verification
def create_access_token(user_id: int, secret_key: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or ACCESS_TOKEN_EXPIRE)
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str, secret_key: str) -> Optional[int]:
    """Return the user id carried by a valid token, or None."""
    try:
        payload = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None

    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None
