from fastapi import APIRouter, Depends, HTTPException, status

from aitinerary.core.auth import create_access_token, get_password_hash, verify_password
from aitinerary.core.errors import DuplicateUserError
from aitinerary.core.preferences import PREFERENCE_QUESTIONS
from aitinerary.core.repository import MongoDBRepo, get_repo
from aitinerary.core.schemas import (
    LoginRequest,
    PreferenceQuestion,
    Token,
    User,
    UserCreate,
    UserPreferences,
)
from aitinerary.core.security import get_current_user

router = APIRouter(prefix="/users", tags=["users"])

DUPLICATE_DETAILS = {"email": "Email already registered", "username": "Username already taken"}


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, repo: MongoDBRepo = Depends(get_repo)):
    """Create an account with email, username and password."""
    if repo.get_user_by_email(user_data.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_DETAILS["email"])
    if repo.get_user_by_username(user_data.username):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_DETAILS["username"])
    try:
        return repo.create_user(user_data, get_password_hash(user_data.password))
    except DuplicateUserError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_DETAILS[e.field])


@router.post("/login", response_model=Token)
def login(credentials: LoginRequest, repo: MongoDBRepo = Depends(get_repo)):
    found = repo.get_user_credentials(credentials.email)
    if not found or not verify_password(credentials.password, found[1]):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user, _ = found
    return Token(access_token=create_access_token({"sub": user.id}))


@router.get("/me", response_model=User)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/me/preferences", response_model=UserPreferences)
def read_my_preferences(current_user: User = Depends(get_current_user)):
    return current_user.preferences


@router.put("/me/preferences", response_model=User)
def update_my_preferences(
    preferences: UserPreferences,
    current_user: User = Depends(get_current_user),
    repo: MongoDBRepo = Depends(get_repo),
):
    """
    Replace the personalization answers of the current user.

    Omitted or null fields are stored as unanswered.
    """
    user = repo.update_user_preferences(current_user.id, preferences)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/preferences/questions", response_model=list[PreferenceQuestion])
def preference_questions():
    """The personalization questionnaire shown to users."""
    return PREFERENCE_QUESTIONS
