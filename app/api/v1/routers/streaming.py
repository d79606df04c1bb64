from fastapi import APIRouter, Depends

from app.api.v1.dependency import CurrentUser, get_status_aggregator, get_transmission_manager
from app.api.v1.schemas.transmission import TransmissionStartIn, TransmissionStopIn
from app.domain.live.status.status_domain import StatusAggregator
from app.domain.live.transmission.transmission_domain import TransmissionSessionManager
from app.domain.live.transmission.transmission_models import TransmissionStartParams
from app.shared.api.utils import make_response

router = APIRouter(prefix="/streaming", tags=["Transmission"])


@router.get("/status")
async def transmission_status(
    user: CurrentUser,
    aggregator: StatusAggregator = Depends(get_status_aggregator),
):
    """Active transmission of the caller, if any."""
    result = await aggregator.transmission_status(user.user_id)
    return make_response(result.model_dump(mode="json", by_alias=True))


@router.post("/start")
async def start_transmission(
    body: TransmissionStartIn,
    user: CurrentUser,
    manager: TransmissionSessionManager = Depends(get_transmission_manager),
):
    """Start a playlist transmission, finalizing the caller's active one."""
    params = TransmissionStartParams(
        owner_id=user.user_id,
        playlist_id=body.playlist_id,
        title=body.titulo,
        description=body.descricao,
        caller_login=user.login,
        platform_ids=body.platform_ids,
        enable_recording=body.enable_recording,
        use_smil=body.use_smil,
        loop_playlist=body.loop_playlist,
    )
    result = await manager.start(params)
    return make_response(result.model_dump(mode="json", exclude_none=True))


@router.post("/stop")
async def stop_transmission(
    body: TransmissionStopIn,
    user: CurrentUser,
    manager: TransmissionSessionManager = Depends(get_transmission_manager),
):
    result = await manager.stop(body.transmission_id)
    return make_response(result.model_dump(mode="json"))
