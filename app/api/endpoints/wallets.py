from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.dependencies import get_indexer_client, require_admin
from app.core.errors import ApiError
from app.services.indexer import IndexerClient

router = APIRouter()
group_tags = ["Wallets"]

APPROVED_WALLETS_QUERY = """
    {
      wallets(where: { granted: true }) {
        id
      }
    }
"""

SUBMITTED_WALLETS_QUERY = """
    {
      wallets(where: { pending: true }) {
        id
      }
    }
"""


async def _run_query(indexer: IndexerClient, query: str, error_message: str) -> JSONResponse:
    try:
        data = await indexer.query(query)
    except ApiError as e:
        raise ApiError(e.kind, error_message) from e
    return JSONResponse(content=data)


@router.get("/approved-wallets", tags=group_tags)
async def approved_wallets(
    wallet_address: str = Depends(require_admin),
    indexer: IndexerClient = Depends(get_indexer_client),
) -> JSONResponse:
    """Wallets granted on the Whitelist contract, as returned by the indexer."""
    return await _run_query(
        indexer, APPROVED_WALLETS_QUERY, "Error querying approved wallets with TheGraph Studio API"
    )


@router.get("/submitted-wallets", tags=group_tags)
async def submitted_wallets(
    wallet_address: str = Depends(require_admin),
    indexer: IndexerClient = Depends(get_indexer_client),
) -> JSONResponse:
    """Wallets with a pending application."""
    return await _run_query(
        indexer, SUBMITTED_WALLETS_QUERY, "Error querying submitted wallets with TheGraph Studio API"
    )
