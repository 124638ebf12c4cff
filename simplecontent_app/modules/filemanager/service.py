"""Media files under the configured media root."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from typing import Dict, List, Optional

from werkzeug.utils import secure_filename

from ...core.error_handlers import NotFoundError, SimpleContentError, ValidationError
from ...models import FileManagerOptions

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_SIZE = 64 * 1024


class FileManagerError(SimpleContentError):
    """A path escapes the media root or an operation is not allowed."""

    def __init__(self, message: str):
        super().__init__(message=message, code='FILE_MANAGER_ERROR', status_code=400)


class FileManagerService:
    def __init__(self, root: str, options: Optional[FileManagerOptions] = None) -> None:
        self.root = os.path.realpath(root)
        self.options = options or FileManagerOptions()

    def _resolve(self, virtual_path: str) -> str:
        relative = (virtual_path or "").replace("\\", "/").strip("/")
        target = os.path.realpath(os.path.join(self.root, relative))
        if target != self.root and not target.startswith(self.root + os.sep):
            raise FileManagerError(f"Path '{virtual_path}' is outside the media root")
        return target

    def _virtual(self, absolute: str) -> str:
        return os.path.relpath(absolute, self.root).replace(os.sep, "/")

    def list(self, virtual_path: str = "") -> Dict[str, List[Dict[str, object]]]:
        folder = self._resolve(virtual_path)
        if not os.path.isdir(folder):
            if folder == self.root:
                return {"folders": [], "files": []}
            raise NotFoundError("Folder not found", resource=virtual_path)

        folders: List[Dict[str, object]] = []
        files: List[Dict[str, object]] = []
        for entry in sorted(os.scandir(folder), key=lambda item: item.name.lower()):
            if entry.is_dir():
                folders.append({"name": entry.name, "path": self._virtual(entry.path)})
            elif entry.is_file():
                files.append({
                    "name": entry.name,
                    "path": self._virtual(entry.path),
                    "size": entry.stat().st_size,
                })
        return {"folders": folders, "files": files}

    def _check_extension(self, filename: str) -> None:
        allowed = {ext.lower() if ext.startswith(".") else "." + ext.lower()
                   for ext in self.options.allowed_file_extensions}
        extension = os.path.splitext(filename)[1].lower()
        if allowed and extension not in allowed:
            raise ValidationError(
                "File type not allowed",
                errors={"file": f"'{extension or filename}' is not an allowed extension"},
            )

    def save(self, virtual_path: str, file_storage) -> str:
        filename = secure_filename(file_storage.filename or "")
        if not filename:
            raise ValidationError("A file is required", errors={"file": "missing file name"})
        self._check_extension(filename)

        folder = self._resolve(virtual_path)
        os.makedirs(folder, exist_ok=True)
        destination = os.path.join(folder, filename)
        limit = self.options.max_upload_size_bytes

        # An existing file is replaced only after the whole upload fits the limit
        handle, temp_path = tempfile.mkstemp(dir=folder, prefix=".upload-")
        try:
            size = 0
            with os.fdopen(handle, "wb") as temp_file:
                while True:
                    chunk = file_storage.stream.read(UPLOAD_CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if limit and size > limit:
                        raise ValidationError(
                            "File too large",
                            errors={"file": f"upload exceeds {limit} bytes"},
                        )
                    temp_file.write(chunk)
            os.chmod(temp_path, 0o644)
            os.replace(temp_path, destination)
        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

        logger.info("Saved media file %s (%s bytes)", self._virtual(destination), size)
        return self._virtual(destination)

    def create_folder(self, virtual_path: str, name: str) -> str:
        folder_name = secure_filename(name or "")
        if not folder_name:
            raise ValidationError("A folder name is required", errors={"name": "missing"})
        target = self._resolve(f"{virtual_path}/{folder_name}")
        os.makedirs(target, exist_ok=True)
        return self._virtual(target)

    def delete(self, virtual_path: str) -> None:
        target = self._resolve(virtual_path)
        if target == self.root:
            raise FileManagerError("The media root cannot be deleted")
        if os.path.isfile(target):
            os.remove(target)
        elif os.path.isdir(target):
            if os.listdir(target):
                raise FileManagerError(f"Folder '{virtual_path}' is not empty")
            shutil.rmtree(target)
        else:
            raise NotFoundError("File not found", resource=virtual_path)
        logger.info("Deleted media path %s", virtual_path)
