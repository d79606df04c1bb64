from typing import Annotated

from fastapi import Depends, Request
from loguru import logger
from pydantic import BaseModel
from redis.asyncio import Redis

from app.app_config import get_app_environ_config
from app.domain.live.status.status_domain import StatusAggregator
from app.domain.live.streaming._store import BeanieStreamingStore
from app.domain.live.streaming.streaming_domain import StreamingLifecycleController
from app.domain.live.transmission._owner_lock import RedisOwnerLock
from app.domain.live.transmission._store import BeanieTransmissionStore
from app.domain.live.transmission.transmission_domain import TransmissionSessionManager
from app.services.integrations.manifest_service import ManifestClient, build_manifest_client
from app.services.integrations.streaming_control_service import build_streaming_control_client
from app.shared.api.utils import get_redis_major_client
from app.shared.domain.auth.verify_token import verify_token
from app.utils.app_errors import AuthenticationError


class User(BaseModel):
    user_id: int
    role: str | None = None
    login: str | None = None


async def get_current_user(request: Request) -> User:
    app_config = get_app_environ_config()
    user_info = verify_token(request, app_config.JWT_SECRET, app_config.JWT_ALGORITHM)
    if not user_info:
        raise AuthenticationError(errmesg="Invalid token")

    logger.debug("Authenticated user_id: {} role: {}", user_info["user_id"], user_info["role"])
    return User(**user_info)


CurrentUser = Annotated[User, Depends(get_current_user)]


# Singletons, built on first use (after the lifespan initialized Beanie)
_streaming_store: BeanieStreamingStore | None = None
_transmission_store: BeanieTransmissionStore | None = None
_lifecycle_controller: StreamingLifecycleController | None = None
_status_aggregator: StatusAggregator | None = None
_manifest_client: ManifestClient | None = None


def _get_streaming_store() -> BeanieStreamingStore:
    global _streaming_store
    if _streaming_store is None:
        _streaming_store = BeanieStreamingStore()
    return _streaming_store


def _get_transmission_store() -> BeanieTransmissionStore:
    global _transmission_store
    if _transmission_store is None:
        _transmission_store = BeanieTransmissionStore()
    return _transmission_store


def get_lifecycle_controller() -> StreamingLifecycleController:
    global _lifecycle_controller
    if _lifecycle_controller is None:
        _lifecycle_controller = StreamingLifecycleController(
            store=_get_streaming_store(),
            control=build_streaming_control_client(),
        )
    return _lifecycle_controller


def get_status_aggregator() -> StatusAggregator:
    global _status_aggregator
    if _status_aggregator is None:
        _status_aggregator = StatusAggregator(
            streaming_store=_get_streaming_store(),
            transmission_store=_get_transmission_store(),
            control=build_streaming_control_client(),
        )
    return _status_aggregator


def _get_manifest_client() -> ManifestClient:
    global _manifest_client
    if _manifest_client is None:
        _manifest_client = build_manifest_client()
    return _manifest_client


def get_transmission_manager(
    redis_client: Redis = Depends(get_redis_major_client),
) -> TransmissionSessionManager:
    # Built per request so the lock always uses the live Redis client of the app
    app_config = get_app_environ_config()
    return TransmissionSessionManager(
        store=_get_transmission_store(),
        streaming_store=_get_streaming_store(),
        manifest=_get_manifest_client(),
        owner_lock=RedisOwnerLock(
            redis_client,
            ttl=app_config.TRANSMISSION_LOCK_TTL_SECONDS,
            wait_seconds=app_config.TRANSMISSION_LOCK_WAIT_SECONDS,
        ),
        app_config=app_config,
    )
