"""Photo uploads for photo missions."""

from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

import questmap.api.deps as deps
from questmap.api.errors import DOMAIN_ERRORS, http_error
from questmap.api.mappers import upload_to_api
from questmap.api.schemas import UploadOut
from questmap.domain.usecase.uploads import RegisterUpload

router = APIRouter(prefix="/uploads", tags=["Uploads"])

uploads_repo = deps.uploads_repo
quests_repo = deps.quests_repo
scores_repo = deps.scores_repo
media_store = deps.media_store
media_resolver = deps.media_resolver
settings = deps.settings


@router.post("", response_model=UploadOut, status_code=201)
async def create_upload(
    user_id: Optional[str] = Form(default=None),
    quest_id: Optional[str] = Form(default=None),
    file: Optional[UploadFile] = File(default=None),
) -> UploadOut:
    """Store an image; uploading for a photo quest completes the mission."""
    if file is None:
        raise HTTPException(status_code=400, detail="file is required")

    try:
        data = await file.read()
    finally:
        await file.close()

    try:
        usecase = RegisterUpload(
            uploads_repo=uploads_repo,
            quests_repo=quests_repo,
            scores_repo=scores_repo,
            media_store=media_store,
            media_resolver=media_resolver,
            settings=settings,
        )
        outcome = await usecase.execute(
            user_id=user_id,
            quest_id=quest_id,
            data=data,
            content_type=file.content_type,
            filename=file.filename,
        )
    except DOMAIN_ERRORS as err:
        raise http_error(err) from err
    return upload_to_api(outcome)
