"""
FastAPI Dependencies

Common dependencies for learner identity and admin authorization.
"""

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import APIKeyHeader

from app.config import settings

# Admin key header scheme
admin_key_header = APIKeyHeader(name="X-Admin-Key", auto_error=False)


async def get_learner_id(
    x_learner_id: str | None = Header(None, alias="X-Learner-Id"),
) -> str:
    """
    Resolve the calling learner.

    The identity provider in front of the API authenticates the learner and
    forwards their id in the X-Learner-Id header.

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    learner_id = (x_learner_id or "").strip()
    if not learner_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing learner id. Provide X-Learner-Id header.",
        )
    if len(learner_id) > 64:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Learner id must be at most 64 characters",
        )
    return learner_id


async def verify_admin_api_key(
    api_key: str | None = Depends(admin_key_header),
) -> str:
    """
    Verify the admin panel key.

    If ADMIN_API_KEY is not configured in settings (empty string),
    the check is disabled (development mode).

    Returns:
        str: The validated API key

    Raises:
        HTTPException: 401 if the key is missing or invalid
    """
    if not settings.ADMIN_API_KEY:
        return "dev-mode"

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing admin key. Provide X-Admin-Key header.",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if api_key != settings.ADMIN_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return api_key


# Dependencies that can be used in routers
CurrentLearner = Depends(get_learner_id)
RequireAdminKey = Depends(verify_admin_api_key)
