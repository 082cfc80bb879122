from __future__ import annotations

import random

from questmap.core.settings import load_settings
from questmap.infra.db import get_db
from questmap.infra.mongo.quests_repo import QuestsRepoMongo
from questmap.infra.mongo.scores_repo import ScoresRepoMongo
from questmap.infra.mongo.uploads_repo import UploadsRepoMongo
from questmap.infra.storage.s3_media_store import S3MediaStore
from questmap.jobs.reconcile_photo_scores import ReconcilePhotoScores
from questmap.services.default_images import DefaultImageDirectory
from questmap.services.media_resolver import MediaResolver

# Singletons shared by every router
settings = load_settings()

quests_repo = QuestsRepoMongo(get_db())
scores_repo = ScoresRepoMongo(get_db())
uploads_repo = UploadsRepoMongo(get_db())
media_store = S3MediaStore.from_settings(settings)

# One directory per process so the listing cache is shared across requests.
default_images = DefaultImageDirectory(
    media_store=media_store,
    prefix=settings.default_image_prefix,
    ttl_seconds=settings.default_image_cache_ttl_seconds,
)
media_resolver = MediaResolver(
    uploads_repo=uploads_repo,
    default_images=default_images,
    media_store=media_store,
    signed_url_ttl=settings.signed_url_ttl_seconds,
    max_default_slots=settings.default_image_slots,
)
quest_rng = random.Random()


def indexed_repos() -> tuple[QuestsRepoMongo, ScoresRepoMongo, UploadsRepoMongo]:
    return (quests_repo, scores_repo, uploads_repo)


def reconcile_job() -> ReconcilePhotoScores:
    return ReconcilePhotoScores(
        quests_repo=quests_repo,
        uploads_repo=uploads_repo,
        scores_repo=scores_repo,
    )
