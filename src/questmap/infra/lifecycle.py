from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional, Protocol

from pymongo.errors import PyMongoError

from questmap.infra.db import close_client, get_client, ping

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from questmap.jobs.reconcile_photo_scores import ReconcilePhotoScores

log = logging.getLogger(__name__)


class _Indexed(Protocol):
    async def ensure_indexes(self) -> None: ...


async def on_startup(
    repos: Iterable[_Indexed],
    reconcile_job: Optional["ReconcilePhotoScores"] = None,
) -> None:
    """Warm the client, create indexes and run the one-shot reconciliation.

    Nothing here is allowed to abort startup; an unreachable store leaves
    the API up so read paths can answer 503 on their own.
    """
    get_client()
    if not await ping():
        log.warning("Mongo unreachable at startup; skipping index setup")
        return

    for repo in repos:
        try:
            await repo.ensure_indexes()
        except PyMongoError as exc:
            log.warning(
                "Index setup failed for %s", type(repo).__name__, exc_info=exc
            )

    if reconcile_job is not None:
        await reconcile_job.run()


async def on_shutdown() -> None:
    await close_client()
