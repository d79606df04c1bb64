from fastapi import APIRouter, Depends

from app.api.v1.dependency import CurrentUser, get_lifecycle_controller, get_status_aggregator
from app.api.v1.schemas.streaming_control import StreamingLoginIn
from app.domain.live.status.status_domain import StatusAggregator
from app.domain.live.streaming.streaming_domain import StreamingLifecycleController
from app.domain.live.streaming.streaming_models import TransitionResult
from app.shared.api.utils import make_response

router = APIRouter(prefix="/streaming-control", tags=["Streaming Control"])


def _transition_response(result: TransitionResult):
    return make_response(result.model_dump(mode="json", by_alias=True, exclude_none=True))


@router.post("/ligar")
async def ligar(
    body: StreamingLoginIn,
    user: CurrentUser,
    controller: StreamingLifecycleController = Depends(get_lifecycle_controller),
):
    """Turn a streaming on. Already active is a successful no-op (`alreadyActive`)."""
    return _transition_response(await controller.turn_on(body.login))


@router.post("/desligar")
async def desligar(
    body: StreamingLoginIn,
    user: CurrentUser,
    controller: StreamingLifecycleController = Depends(get_lifecycle_controller),
):
    """Turn a streaming off. Already inactive is a successful no-op (`alreadyInactive`)."""
    return _transition_response(await controller.turn_off(body.login))


@router.post("/reiniciar")
async def reiniciar(
    body: StreamingLoginIn,
    user: CurrentUser,
    controller: StreamingLifecycleController = Depends(get_lifecycle_controller),
):
    return _transition_response(await controller.restart(body.login))


@router.post("/bloquear")
async def bloquear(
    body: StreamingLoginIn,
    user: CurrentUser,
    controller: StreamingLifecycleController = Depends(get_lifecycle_controller),
):
    """Block a streaming (admin/revenda only)."""
    return _transition_response(await controller.block(body.login, user.role))


@router.post("/desbloquear")
async def desbloquear(
    body: StreamingLoginIn,
    user: CurrentUser,
    controller: StreamingLifecycleController = Depends(get_lifecycle_controller),
):
    """Unblock a streaming (admin/revenda only)."""
    return _transition_response(await controller.unblock(body.login, user.role))


@router.delete("/remover")
async def remover(
    body: StreamingLoginIn,
    user: CurrentUser,
    controller: StreamingLifecycleController = Depends(get_lifecycle_controller),
):
    """Remove a streaming (admin/revenda only). The row is kept with status `removido`."""
    return _transition_response(await controller.remove(body.login, user.role))


@router.get("/status/{login}")
async def streaming_status(
    login: str,
    user: CurrentUser,
    aggregator: StatusAggregator = Depends(get_status_aggregator),
):
    """Live status report from the streaming control service."""
    global_config = await aggregator.load_global_config()
    return make_response(await aggregator.entity_status(login, global_config))


@router.get("/list")
async def list_streamings(
    user: CurrentUser,
    aggregator: StatusAggregator = Depends(get_status_aggregator),
):
    """Streamings of the caller, with server name and status, ordered by login."""
    result = await aggregator.list_entities(user.user_id)
    return make_response(result.model_dump(mode="json", by_alias=True))
