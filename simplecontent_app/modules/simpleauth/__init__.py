# File: simplecontent_app/modules/simpleauth/__init__.py
from .principal import SiteUser
from .user_store import SimpleAuthUserStore

__all__ = ["SiteUser", "SimpleAuthUserStore"]
