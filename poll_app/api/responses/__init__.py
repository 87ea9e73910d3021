"""
Response definitions for FastAPI endpoints.

This module provides centralized response configurations for OpenAPI documentation,
so every router documents its error bodies the same way.
"""

from poll_app.schemas.error import ErrorResponse

CONTENT_TYPE_JSON = "application/json"


def error_response(description: str, example: str) -> dict:
    """OpenAPI entry for a ``{"error": ...}`` response."""
    return {
        "description": description,
        "model": ErrorResponse,
        "content": {CONTENT_TYPE_JSON: {"example": {"error": example}}},
    }


BAD_REQUEST_RESPONSE = error_response("Malformed body or failed validation", "Title and at least 2 options are required")
AUTH_ERROR_RESPONSE = error_response("Missing, invalid or expired bearer token", "Invalid token")
FORBIDDEN_RESPONSE = error_response("Caller does not own the poll", "You can only edit your own polls")
POLL_NOT_FOUND_RESPONSE = error_response("Poll does not exist", "Poll not found")
SERVER_ERROR_RESPONSE = error_response("Storage or transaction failure", "Database operation failed")


def get_poll_create_responses() -> dict:
    return {400: BAD_REQUEST_RESPONSE, 401: AUTH_ERROR_RESPONSE, 500: SERVER_ERROR_RESPONSE}


def get_poll_read_responses() -> dict:
    return {401: AUTH_ERROR_RESPONSE, 404: POLL_NOT_FOUND_RESPONSE}


def get_poll_update_responses() -> dict:
    return {
        400: BAD_REQUEST_RESPONSE,
        401: AUTH_ERROR_RESPONSE,
        403: FORBIDDEN_RESPONSE,
        404: POLL_NOT_FOUND_RESPONSE,
        500: SERVER_ERROR_RESPONSE,
    }


def get_poll_delete_responses() -> dict:
    return {
        401: AUTH_ERROR_RESPONSE,
        403: error_response("Caller does not own the poll", "You can only delete your own polls"),
        404: POLL_NOT_FOUND_RESPONSE,
        500: SERVER_ERROR_RESPONSE,
    }


def get_poll_vote_responses() -> dict:
    return {
        400: error_response("Option is not part of the poll", "Invalid option for this poll"),
        401: AUTH_ERROR_RESPONSE,
        404: POLL_NOT_FOUND_RESPONSE,
        500: SERVER_ERROR_RESPONSE,
    }


def get_signup_responses() -> dict:
    return {
        400: BAD_REQUEST_RESPONSE,
        409: error_response("Username or email taken", "Username or email already exists"),
        500: SERVER_ERROR_RESPONSE,
    }


def get_login_responses() -> dict:
    return {401: error_response("Wrong email or password", "Invalid credentials")}


def get_notification_responses() -> dict:
    return {
        401: AUTH_ERROR_RESPONSE,
        404: error_response("Notification does not exist or belongs to someone else", "Notification not found"),
    }
