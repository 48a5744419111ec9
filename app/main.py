from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api import dashboard, health, stats
from .config import get_settings
from .errors import DashboardError
from .logging_config import setup_logging

logger = setup_logging("app", get_settings().log_level)

app = FastAPI(title="ALB Demo Dashboard")

app.include_router(dashboard.router, tags=["dashboard"])
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(stats.router, prefix="/api", tags=["stats"])


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    # failures raised while resolving dependencies, before the route body runs
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})
