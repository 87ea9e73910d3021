from pydantic import BaseModel
from typing import List, Optional


class ErrorDetail(BaseModel):
    """Individual error detail for validation errors"""
    loc: List[str]  # Location of the error (field path)
    msg: str        # Error message


class ErrorResponse(BaseModel):
    """Body of every error response"""
    error: str
    details: Optional[List[ErrorDetail]] = None
