from fastapi import APIRouter, HTTPException

from questmap.infra.db import ping

router = APIRouter(tags=["Health"])


@router.get("/healthz")
@router.get("/api/health", include_in_schema=False)
async def healthz() -> dict[str, bool]:
    return {"ok": True}


@router.get("/healthz/db")
@router.get("/api/health/db", include_in_schema=False)
async def healthz_db() -> dict[str, bool]:
    if not await ping():
        raise HTTPException(status_code=503, detail="Database unreachable")
    return {"ok": True}
