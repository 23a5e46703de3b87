"""HTTP-mapped error taxonomy shared by crud and routers.

Each class is an ``HTTPException`` so FastAPI's own handler chain carries it;
``main.py`` renders every one of them as ``{"success": false, "message": ...}``.
"""
from typing import Any, Optional

from fastapi import HTTPException, status


class UnauthenticatedError(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class ForbiddenError(HTTPException):
    def __init__(self, detail: str = "You do not have permission to access this resource"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    """Uniqueness violation. ``data`` optionally carries the existing record."""

    def __init__(self, detail: str, data: Optional[Any] = None):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)
        self.data = data


class InvalidInputError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
