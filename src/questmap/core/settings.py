from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def _env_optional(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None


DEFAULT_PHOTO_INSTRUCTION = (
    "Take a photo of this place and upload it to complete the mission."
)


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the quest engine."""

    s3_bucket: str
    s3_endpoint_url: Optional[str]
    s3_region: Optional[str]
    s3_access_key_id: Optional[str]
    s3_secret_access_key: Optional[str]
    s3_connect_timeout: float
    s3_read_timeout: float
    media_public_base_url: Optional[str]
    default_image_prefix: str
    default_image_cache_ttl_seconds: int
    default_image_slots: int
    signed_url_ttl_seconds: int
    max_upload_bytes: int
    photo_instruction: str
    upload_endpoint: str
    reconcile_on_startup: bool

    def public_url_for(self, storage_key: str) -> str:
        """Unsigned URL for a key; only usable once signed or if the bucket is public."""
        if self.media_public_base_url:
            return f"{self.media_public_base_url.rstrip('/')}/{storage_key}"
        if self.s3_endpoint_url:
            return f"{self.s3_endpoint_url.rstrip('/')}/{self.s3_bucket}/{storage_key}"
        return f"https://{self.s3_bucket}.s3.amazonaws.com/{storage_key}"


def load_settings() -> Settings:
    """Construct Settings from environment variables."""
    return Settings(
        s3_bucket=os.getenv("S3_BUCKET", "questmap-media").strip(),
        s3_endpoint_url=_env_optional("S3_ENDPOINT_URL"),
        s3_region=_env_optional("S3_REGION"),
        s3_access_key_id=_env_optional("S3_ACCESS_KEY_ID"),
        s3_secret_access_key=_env_optional("S3_SECRET_ACCESS_KEY"),
        s3_connect_timeout=_env_float("S3_CONNECT_TIMEOUT_SECONDS", 3.0),
        s3_read_timeout=_env_float("S3_READ_TIMEOUT_SECONDS", 5.0),
        media_public_base_url=_env_optional("MEDIA_PUBLIC_BASE_URL"),
        default_image_prefix=os.getenv("DEFAULT_IMAGE_PREFIX", "defaults/"),
        default_image_cache_ttl_seconds=_env_int(
            "DEFAULT_IMAGE_CACHE_TTL_SECONDS", 300
        ),
        default_image_slots=_env_int("DEFAULT_IMAGE_SLOTS", 3),
        signed_url_ttl_seconds=_env_int("SIGNED_URL_TTL_SECONDS", 300),
        max_upload_bytes=_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        photo_instruction=os.getenv("PHOTO_INSTRUCTION", DEFAULT_PHOTO_INSTRUCTION),
        upload_endpoint=os.getenv("UPLOAD_ENDPOINT", "/uploads"),
        reconcile_on_startup=_env_flag("RECONCILE_ON_STARTUP", default=True),
    )


__all__ = ["Settings", "load_settings"]
