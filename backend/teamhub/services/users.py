import logging
from typing import Optional

from teamhub.core.exceptions import NotFoundError, Unauthenticated, ValidationError
from teamhub.core.security import get_password_hash, verify_password
from teamhub.models.user import User
from teamhub.permissions import Requester
from teamhub.schemas.user import UserRegister

logger = logging.getLogger(__name__)


def require_requester(requester: Optional[Requester]) -> Requester:
    if requester is None:
        raise Unauthenticated()
    return requester


async def register_user(store, user_in: UserRegister) -> User:
    if await store.get_user_by_email(user_in.email):
        raise ValidationError("User already exists")

    # Registration never grants a role, admins are promoted out of band
    user = User(
        name=user_in.name,
        last_name=user_in.last_name,
        email=user_in.email,
        hashed_password=get_password_hash(user_in.password),
        role="user",
    )
    user = await store.add(user)
    logger.info("Registered user %s", user.id)
    return user


async def authenticate(store, email: str, password: str) -> User:
    user = await store.get_user_by_email(email)
    if not user or not verify_password(password, user.hashed_password):
        raise Unauthenticated("Invalid email or password")
    return user


async def get_profile(store, requester: Optional[Requester]) -> User:
    requester = require_requester(requester)
    user = await store.get_user(requester.id)
    if user is None:
        raise NotFoundError("user", "User not found")
    return user
