# api/security.py
import logging
import secrets
from typing import Optional

from fastapi import Header

from config import settings
from core.errors import AuthorizationError

logger = logging.getLogger(settings.LOGGER_NAME)


async def require_api_key(x_api_key: Optional[str] = Header(None, alias="x-api-key")) -> None:
    """
    Shared-secret gate for admin routes.

    Runs before the handler, so a bad key is a 401 whether or not the
    requested resource exists. No configured key means nobody gets in.
    """
    expected = settings.api_key
    if not expected or not x_api_key or not secrets.compare_digest(
        x_api_key.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.warning("Rejected request with missing or invalid API key")
        raise AuthorizationError("Unauthorized: Invalid or missing API key")
