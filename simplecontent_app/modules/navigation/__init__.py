# File: simplecontent_app/modules/navigation/__init__.py
from .service import NavigationService

__all__ = ["NavigationService"]
