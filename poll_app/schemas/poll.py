from pydantic import BaseModel, Field, field_validator, field_serializer, ConfigDict
from datetime import datetime
from typing import Optional, List

from poll_app.core.constants import BusinessLimits, ErrorMessages
from poll_app.core.timeutils import as_utc
from poll_app.schemas.user import UserRead


def _clean_title(v: str) -> str:
    if not v or not v.strip():
        raise ValueError(ErrorMessages.POLL_REQUIREMENTS)
    return v.strip()


def _clean_description(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    return v.strip() or None


def _clean_option_text(v: str) -> str:
    if not v or not v.strip():
        raise ValueError('Option text cannot be empty or just whitespace')
    return v.strip()


# Schema for creating a new poll
class PollCreate(BaseModel):
    title: str = Field(
        ...,
        max_length=BusinessLimits.MAX_POLL_TITLE_LENGTH,
        json_schema_extra={"example": "Where should we go for lunch?"}
    )
    description: Optional[str] = Field(
        None,
        max_length=BusinessLimits.MAX_POLL_DESCRIPTION_LENGTH,
        json_schema_extra={"example": "Team lunch on Friday"}
    )
    options: List[str] = Field(
        ...,
        description=f"Option texts, at least {BusinessLimits.MIN_POLL_OPTIONS}",
        json_schema_extra={"example": ["Pizza", "Sushi"]}
    )

    @field_validator('title')
    def validate_title(cls, v):
        return _clean_title(v)

    @field_validator('description')
    def validate_description(cls, v):
        return _clean_description(v)

    @field_validator('options')
    def validate_options(cls, v):
        if len(v) < BusinessLimits.MIN_POLL_OPTIONS:
            raise ValueError(ErrorMessages.POLL_REQUIREMENTS)
        cleaned = [_clean_option_text(text) for text in v]
        if any(len(text) > BusinessLimits.MAX_OPTION_TEXT_LENGTH for text in cleaned):
            raise ValueError(f'Each option must be at most {BusinessLimits.MAX_OPTION_TEXT_LENGTH} characters long')
        return cleaned


class OptionUpdate(BaseModel):
    """An option in an edit request. Without ``id`` it is a new option."""
    id: Optional[int] = Field(None, gt=0)
    text: str = Field(..., max_length=BusinessLimits.MAX_OPTION_TEXT_LENGTH)

    @field_validator('text')
    def validate_text(cls, v):
        return _clean_option_text(v)


# Schema for editing a poll; replaces title, description and the option set
class PollUpdate(BaseModel):
    title: str = Field(..., max_length=BusinessLimits.MAX_POLL_TITLE_LENGTH)
    description: Optional[str] = Field(None, max_length=BusinessLimits.MAX_POLL_DESCRIPTION_LENGTH)
    options: List[OptionUpdate]

    @field_validator('title')
    def validate_title(cls, v):
        return _clean_title(v)

    @field_validator('description')
    def validate_description(cls, v):
        return _clean_description(v)

    @field_validator('options')
    def validate_options(cls, v):
        if len(v) < BusinessLimits.MIN_POLL_OPTIONS:
            raise ValueError(ErrorMessages.POLL_REQUIREMENTS)
        ids = [option.id for option in v if option.id is not None]
        if len(ids) != len(set(ids)):
            raise ValueError('Option ids must be unique')
        return v


class VoteRequest(BaseModel):
    option_id: int = Field(..., gt=0)


class OptionRead(BaseModel):
    id: int
    text: str
    vote_count: int = Field(0, description="Number of votes for this option")


# Schema for reading poll data, as seen by one user
class PollRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    creator: UserRead
    options: List[OptionRead]
    created_at: datetime
    updated_at: datetime
    user_voted_option_id: Optional[int] = Field(None, description="Option the viewer voted for, if any")
    poll_edited_after_vote: bool = Field(False, description="The poll changed after the viewer voted")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Where should we go for lunch?",
                "description": "Team lunch on Friday",
                "creator": {"id": 1, "username": "alice", "email": "alice@example.com"},
                "options": [
                    {"id": 1, "text": "Pizza", "vote_count": 3},
                    {"id": 2, "text": "Sushi", "vote_count": 1}
                ],
                "created_at": "2024-01-01T12:00:00+00:00",
                "updated_at": "2024-01-01T12:00:00+00:00",
                "user_voted_option_id": 1,
                "poll_edited_after_vote": False
            }
        }
    )

    @field_serializer('created_at', 'updated_at')
    def serialize_timestamp(self, value: datetime) -> str:
        return as_utc(value).isoformat()
