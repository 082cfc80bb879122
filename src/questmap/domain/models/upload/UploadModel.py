from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4


@dataclass
class UploadRecord:
    user_id: str
    storage_key: str
    public_url: str
    size_bytes: int
    content_type: str
    quest_id: Optional[int] = None
    upload_id: str = field(default_factory=lambda: uuid4().hex)
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
