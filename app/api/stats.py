import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.errors import DashboardError
from app.models.stats import DashboardStats, ErrorResponse
from app.services import stats_service
from app.services.inventory import InventoryReporter, get_inventory_reporter

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/stats",
    response_model=DashboardStats,
    responses={500: {"model": ErrorResponse}},
    summary="Local utilisation and AWS inventory",
)
async def stats(
    reporter: InventoryReporter = Depends(get_inventory_reporter),
    settings: Settings = Depends(get_settings),
):
    """
    Return CPU/RAM utilisation and identity of the serving host together with
    the EC2, S3 and RDS counts of the configured region.

    Any sampling, inventory or timeout failure aborts the request with HTTP
    500 and a JSON body {"error": <message>}; partial results are never
    returned.
    """
    try:
        return await stats_service.collect_stats(reporter, settings)
    except DashboardError as exc:
        logger.error("Stats request failed: %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})
