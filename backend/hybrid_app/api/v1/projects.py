from fastapi import APIRouter, HTTPException, status

from hybrid_app.schemas.project import ProjectSnapshot, ShareTokenResponse
from hybrid_app.services.sharing import (
    InvalidShareTokenError,
    decode_snapshot,
    encode_snapshot,
)

router = APIRouter()


@router.post(
    "/share",
    response_model=ShareTokenResponse,
    summary="Create share token",
    description="Encode a project snapshot as a URL-safe token. Nothing is stored.",
)
async def share_project(body: ProjectSnapshot) -> ShareTokenResponse:
    return ShareTokenResponse(token=encode_snapshot(body))


@router.get(
    "/shared/{token}",
    response_model=ProjectSnapshot,
    summary="Open share token",
)
async def open_shared_project(token: str) -> ProjectSnapshot:
    try:
        return decode_snapshot(token)
    except InvalidShareTokenError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
