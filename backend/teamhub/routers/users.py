from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from teamhub.core.security import create_access_token
from teamhub.routers.deps import CurrentRequester, Store
from teamhub.schemas.user import AuthResponse, Token, UserLogin, UserProfile, UserRegister
from teamhub.services import users

router = APIRouter(prefix="/api/users", tags=["users"])


def _auth_response(user) -> AuthResponse:
    return AuthResponse(
        id=user.id,
        name=user.name,
        last_name=user.last_name,
        email=user.email,
        role=user.role,
        token=create_access_token(data={"sub": str(user.id)}),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_user(user_in: UserRegister, store: Store):
    user = await users.register_user(store, user_in)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login_user(credentials: UserLogin, store: Store):
    user = await users.authenticate(store, credentials.email, credentials.password)
    return _auth_response(user)


@router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    store: Store,
):
    # OAuth2PasswordRequestForm uses 'username' field, but we treat it as email
    user = await users.authenticate(store, form_data.username, form_data.password)
    access_token = create_access_token(data={"sub": str(user.id)})
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/profile", response_model=UserProfile)
async def get_user_profile(requester: CurrentRequester, store: Store):
    """Get current user profile information"""
    return await users.get_profile(store, requester)
