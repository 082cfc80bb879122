import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

import questmap.api.deps as deps
from questmap.api.routers.health import router as health_router
from questmap.api.routers.quests import router as quests_router
from questmap.api.routers.uploads import router as uploads_router
from questmap.api.routers.users import router as users_router
from questmap.core.logging import configure_logging
from questmap.infra import lifecycle

configure_logging("api.log")
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    job = deps.reconcile_job() if deps.settings.reconcile_on_startup else None
    await lifecycle.on_startup(deps.indexed_repos(), job)
    log.info("Questmap API started")
    try:
        yield
    finally:
        await lifecycle.on_shutdown()


app = FastAPI(title="Questmap API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(health_router)
app.include_router(quests_router)
app.include_router(users_router)
app.include_router(uploads_router)
app.include_router(quests_router, prefix="/api", include_in_schema=False)
app.include_router(users_router, prefix="/api", include_in_schema=False)
app.include_router(uploads_router, prefix="/api", include_in_schema=False)


def main() -> None:
    import uvicorn

    uvicorn.run(
        "questmap.api.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8080")),
        log_level="info",
    )


if __name__ == "__main__":
    main()
