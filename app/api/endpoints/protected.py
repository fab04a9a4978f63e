from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app.core.dependencies import require_granted

router = APIRouter()
group_tags = ["Protected"]

PROTECTED_CONTENT = "Hello! You are viewing protected content."


@router.get(
    "/protected",
    tags=group_tags,
    response_class=PlainTextResponse,
)
async def protected(wallet_address: str = Depends(require_granted)) -> str:
    """Sanity check for the granted gate."""
    return PROTECTED_CONTENT
