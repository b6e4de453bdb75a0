from typing import Annotated, AsyncGenerator, Optional
from uuid import UUID
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from typing_extensions import TypeAlias

from core.async_engine import AsyncSessionLocal
from core.auth import bearer_scheme, decode_access_token
from core.exceptions import AuthError
from core.storage import AssetStorage, get_asset_storage
from schemas.voter_schema import TokenIdentity


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session

AsyncDBSession: TypeAlias = Annotated[AsyncSession, Depends(get_session)]
AssetStorageDep: TypeAlias = Annotated[AssetStorage, Depends(get_asset_storage)]


async def get_current_voter(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]
) -> TokenIdentity:
    if credentials is None:
        raise AuthError("Not authorized, no token")

    token = credentials.credentials
    if not token or token.strip() == "":
        raise AuthError("Not authorized, no token")

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise AuthError("Not authorized, token failed")

    voter_id = payload.get("sub")
    if voter_id is None:
        raise AuthError("Not authorized, token failed")
    try:
        voter_uuid = UUID(voter_id)
    except (TypeError, ValueError):
        raise AuthError("Not authorized, token failed")

    return TokenIdentity(id=voter_uuid, is_admin=bool(payload.get("is_admin", False)))

CurrentVoter: TypeAlias = Annotated[TokenIdentity, Depends(get_current_voter)]


async def get_current_admin(current_voter: CurrentVoter) -> TokenIdentity:
    if not current_voter.is_admin:
        raise AuthError("You are not authorized to perform this action")
    return current_voter

AdminVoter: TypeAlias = Annotated[TokenIdentity, Depends(get_current_admin)]
