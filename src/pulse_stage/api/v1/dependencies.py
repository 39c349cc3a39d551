"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from pulse_stage.core.security import decode_access_token
from pulse_stage.db.session import get_db
from pulse_stage.models import User
from pulse_stage.services.broadcast import Broadcaster, get_broadcaster
from pulse_stage.services.media import MediaStore, get_media_store
from pulse_stage.services.metadata import MetadataClient, get_metadata_client
from pulse_stage.services.post_service import PostService

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as err:
        raise _credentials_error() from err

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as err:
        raise _credentials_error() from err

    user = db.get(User, user_id)
    if user is None:
        raise _credentials_error("User not found")
    return user


def get_metadata_client_dep() -> MetadataClient:
    """Return the shared metadata-extraction client."""
    return get_metadata_client()


def get_broadcaster_dep() -> Broadcaster:
    """Return the process-wide broadcaster."""
    return get_broadcaster()


def get_media_store_dep() -> MediaStore:
    """Return the configured media store."""
    return get_media_store()


CurrentUserDep = Annotated[User, Depends(get_current_user)]
MetadataClientDep = Annotated[MetadataClient, Depends(get_metadata_client_dep)]
BroadcasterDep = Annotated[Broadcaster, Depends(get_broadcaster_dep)]
MediaStoreDep = Annotated[MediaStore, Depends(get_media_store_dep)]


def get_post_service(
    db: SessionDep,
    broadcaster: BroadcasterDep,
    media_store: MediaStoreDep,
) -> PostService:
    """Build a post service bound to the request's session."""
    return PostService(db, broadcaster, media_store)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]
