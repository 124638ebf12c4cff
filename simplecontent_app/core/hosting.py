"""Hosting environment description for the application factory."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .config import BASE_DIR

ENVIRONMENT_VARIABLE = "SIMPLECONTENT_ENVIRONMENT"
DEVELOPMENT = "Development"
PRODUCTION = "Production"


def _default_environment_name() -> str:
    return os.environ.get(ENVIRONMENT_VARIABLE) or PRODUCTION


@dataclass
class HostingEnvironment:
    """Name of the running environment and the root holding settings files."""

    environment_name: str = field(default_factory=_default_environment_name)
    content_root_path: str = BASE_DIR

    def is_development(self) -> bool:
        return self.environment_name.lower() == DEVELOPMENT.lower()

    def resolve(self, relative_path: str) -> str:
        """Resolve a path against the content root."""

        if os.path.isabs(relative_path):
            return relative_path
        return os.path.join(self.content_root_path, relative_path)
