from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

DEFAULT_ALLOWED_EXTENSIONS = [".gif", ".jpg", ".jpeg", ".png", ".svg", ".webp", ".pdf", ".txt", ".zip"]


@dataclass
class FileManagerOptions:
    media_root_path: str = "media"
    allowed_file_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_EXTENSIONS))
    max_upload_size_bytes: int = 10 * 1024 * 1024
