from fastapi import APIRouter

from .utils import ApiSuccess, make_response

router = APIRouter(tags=["Health"])


@router.get('/health', response_model=ApiSuccess)
async def health():
    """Liveness probe; does not touch MongoDB or Redis."""
    return make_response(ApiSuccess(results="OK"))
