from fastapi import APIRouter

router = APIRouter()


@router.get("", summary="Liveness probe")
async def health() -> dict:
    """Cheap check for load balancer target groups; touches neither psutil nor AWS."""
    return {"status": "ok"}
