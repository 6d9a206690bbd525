import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.errors import DuplicateKeyError

from ..models.user import AuthResponse, User, UserCreate, UserLogin, UserRole
from ..utils.database import get_database, storage_errors, to_public
from ..utils.security import (
    create_user_token,
    get_current_user,
    get_password_hash,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["authentication"])


def _public_user(user: dict) -> User:
    user = {k: v for k, v in user.items() if k != "password_hash"}
    return User.model_validate(to_public(user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db=Depends(get_database)):
    """
    Register a new user account
    """
    email = user_data.email.lower()
    with storage_errors("user lookup"):
        existing_user = await db["users"].find_one({"email": email})
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    user_dict = {
        "name": user_data.name,
        "email": email,
        "password_hash": get_password_hash(user_data.password),
        "avatar_url": "",
        "role": UserRole.STUDENT.value,
        "created_at": datetime.utcnow(),
    }
    with storage_errors("user insert"):
        try:
            result = await db["users"].insert_one(user_dict)
        except DuplicateKeyError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )
    user_dict["_id"] = result.inserted_id
    logger.info(f"registered user {result.inserted_id}")

    return {"token": create_user_token(user_dict), "user": _public_user(user_dict)}


@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, db=Depends(get_database)):
    """
    Authenticate user and return access token
    """
    with storage_errors("user lookup"):
        user = await db["users"].find_one({"email": credentials.email.lower()})
    if not user or not verify_password(credentials.password, user.get("password_hash", "")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {"token": create_user_token(user), "user": _public_user(user)}


@router.get("/me", response_model=User)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user
