from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_storage_gateway, require_granted
from app.services.storage_gateway import StorageGateway

router = APIRouter()
group_tags = ["Storage"]

FORWARDED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
IPFS_ADD_PATH = "/api/v0/add"
IPFS_CAT_PATH = "/api/v0/cat"


@router.api_route(IPFS_ADD_PATH, methods=FORWARDED_METHODS, tags=group_tags)
async def ipfs_add(
    request: Request,
    wallet_address: str = Depends(require_granted),
    gateway: StorageGateway = Depends(get_storage_gateway),
):
    """Upload to IPFS. Granted wallets only."""
    return await gateway.forward(request, IPFS_ADD_PATH)


@router.api_route(IPFS_CAT_PATH, methods=FORWARDED_METHODS, tags=group_tags)
async def ipfs_cat(request: Request, gateway: StorageGateway = Depends(get_storage_gateway)):
    """Read from IPFS. Public."""
    return await gateway.forward(request, IPFS_CAT_PATH)
