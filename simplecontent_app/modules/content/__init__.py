# File: simplecontent_app/modules/content/__init__.py
from .interfaces import IProjectQueries, IProjectSecurityResolver
from .project_queries import ConfigProjectQueries
from .security import SimpleAuthProjectSecurityResolver

__all__ = [
    "ConfigProjectQueries",
    "IProjectQueries",
    "IProjectSecurityResolver",
    "SimpleAuthProjectSecurityResolver",
]
