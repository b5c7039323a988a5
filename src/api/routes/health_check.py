from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.adapter.cache.redis_adaptor import RedisAdaptor
from src.depends import get_redis_adaptor
from src.domain.exceptions import StoreUnavailable

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(redis: RedisAdaptor = Depends(get_redis_adaptor)):
    try:
        await redis.ping()
    except StoreUnavailable:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "degraded", "redis": "unavailable"},
        )
    return {"status": "ok", "redis": "ok"}
