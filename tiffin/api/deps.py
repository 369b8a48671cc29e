# tiffin/api/deps.py
from functools import lru_cache

import redis
import requests
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tiffin.services.identity_client import CurrentUser, IdentityClient
from tiffin.utils.settings import REDIS_URL
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)

bearer = HTTPBearer(auto_error=False)


@lru_cache
def get_redis() -> redis.Redis:
    return redis.Redis.from_url(REDIS_URL, decode_responses=True)


@lru_cache
def get_identity_client() -> IdentityClient:
    return IdentityClient()


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    identity: IdentityClient = Depends(get_identity_client),
) -> CurrentUser:
    if not credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        user = identity.verify_token(credentials.credentials)
    except requests.RequestException as e:
        logger.error(f"Identity provider unavailable: {e}")
        raise HTTPException(status_code=503, detail="Identity provider unavailable")

    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return user
