from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from losers.config import Settings
from losers.core.deps import get_settings

router = APIRouter()


@router.get("/")
def read_root(settings: Settings = Depends(get_settings)):
    prefix = settings.API_PREFIX
    return {
        "message": f"{settings.APP_NAME} is running",
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": {
            "api": prefix,
            "auth": f"{prefix}/auth",
            "posts": f"{prefix}/posts",
        },
    }
