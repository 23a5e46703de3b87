import logging
import os
from typing import Any, Dict

from dotenv import load_dotenv
from fastapi import Depends, Request
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from utils.exceptions import UnauthenticatedError

load_dotenv()

# Tokens are issued by the identity service and carry {"id": <user id>}.
# Only verification happens here.
JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

logger = logging.getLogger("auth")


def get_current_user(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency to validate the bearer JWT from the Authorization header.

    Usage:
        @router.get("/secure-data")
        def secure_endpoint(user: dict = Depends(get_current_user)):
            ...
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise UnauthenticatedError("Access denied. No token provided.")

    # The token is expected to be in the format "Bearer <token>"
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthenticatedError("Access denied. Invalid token format.")

    token = parts[1]
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthenticatedError("Token has expired")
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise UnauthenticatedError("Access denied. Invalid token.")


def get_caller_id(user: Dict[str, Any] = Depends(get_current_user)) -> str:
    """Resolve the caller's user id from the verified token payload."""
    caller_id = user.get("id")
    if caller_id is None or caller_id == "":
        raise UnauthenticatedError("Token does not identify a user")
    return str(caller_id)
