from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from aitinerary.core.auth import verify_token
from aitinerary.core.repository import MongoDBRepo, get_repo
from aitinerary.core.schemas import Itinerary, User

# HTTP Bearer token security schemes
security = HTTPBearer(auto_error=False)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    repo: MongoDBRepo = Depends(get_repo),
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    This function:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies the JWT token
    3. Retrieves the user from the database

    Raises:
        HTTPException: 401 Unauthorized if token is invalid or user not found
    """
    if credentials is None:
        raise _credentials_exception()

    user_id = verify_token(credentials.credentials)
    if user_id is None:
        raise _credentials_exception()

    user = repo.get_user(user_id)
    if user is None:
        raise _credentials_exception()

    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    repo: MongoDBRepo = Depends(get_repo),
) -> Optional[User]:
    """
    Dependency for routes that work with or without auth.

    A missing header yields None; a header that is present but invalid is
    still rejected with 401.
    """
    if credentials is None:
        return None
    return get_current_user(credentials, repo)


def get_owned_itinerary(repo: MongoDBRepo, itinerary_id: str, user: User) -> Itinerary:
    """Load an itinerary and make sure the caller owns it."""
    itinerary = repo.get_itinerary(itinerary_id)
    if itinerary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Itinerary not found")
    if itinerary.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return itinerary
