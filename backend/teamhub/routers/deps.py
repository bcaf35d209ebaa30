from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.core.database import get_db
from teamhub.core.exceptions import Unauthenticated
from teamhub.core.security import decode_access_token
from teamhub.permissions import Requester
from teamhub.store import EntityStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/users/token", auto_error=False)


async def get_store(db: AsyncSession = Depends(get_db)) -> EntityStore:
    return EntityStore(db)


async def get_current_requester(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    store: EntityStore = Depends(get_store),
) -> Optional[Requester]:
    """Resolve the bearer token to a requester.

    A missing header yields None so services report Unauthenticated
    themselves; a token that does not verify is rejected here.
    """
    if token is None:
        return None
    user_id = decode_access_token(token)
    if user_id is None:
        raise Unauthenticated("Not authorized, token invalid")
    user = await store.get_user(user_id)
    if user is None:
        raise Unauthenticated("Not authorized, token invalid")
    return Requester.from_user(user)


Store = Annotated[EntityStore, Depends(get_store)]
CurrentRequester = Annotated[Optional[Requester], Depends(get_current_requester)]
