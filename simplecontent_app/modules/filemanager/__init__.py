# File: simplecontent_app/modules/filemanager/__init__.py
from .service import FileManagerError, FileManagerService

__all__ = ["FileManagerError", "FileManagerService"]
