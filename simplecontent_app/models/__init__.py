"""Typed settings objects bound from configuration sections."""

from .auth import CookieAuthOptions, SimpleAuthSettings, SimpleAuthUser, UserClaim
from .content import ProjectSecurityResult, ProjectSettings
from .filemanager import FileManagerOptions
from .navigation import NavigationNode, NavigationOptions

__all__ = [
    "CookieAuthOptions",
    "FileManagerOptions",
    "NavigationNode",
    "NavigationOptions",
    "ProjectSecurityResult",
    "ProjectSettings",
    "SimpleAuthSettings",
    "SimpleAuthUser",
    "UserClaim",
]
