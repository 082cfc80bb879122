from questmap.domain.usecase.uploads.register_upload import (
    RegisterUpload,
    UploadOutcome,
    build_storage_key,
)

__all__ = ["RegisterUpload", "UploadOutcome", "build_storage_key"]
