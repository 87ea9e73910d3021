from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator

from poll_app.core.constants import BusinessLimits


# Define a schema for signing up
class SignupRequest(BaseModel):
    username: str = Field(..., max_length=BusinessLimits.MAX_USERNAME_LENGTH)
    email: EmailStr
    password: str

    @field_validator('username')
    def validate_username(cls, v):
        if not v or not v.strip():
            raise ValueError('Username cannot be empty')
        return v.strip()

    @field_validator('password')
    def validate_password(cls, v):
        # Passwords are taken as typed, only emptiness is rejected
        if not v:
            raise ValueError('Password cannot be empty')
        return v


class LoginRequest(BaseModel):
    email: str
    password: str


# Define a schema for reading user data
class UserRead(BaseModel):
    id: int
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    token: str
    user: UserRead
