"""
Integration seams for the content system.

The content routes depend only on these contracts. Swapping the
authentication backend means registering a different
``IProjectSecurityResolver`` in the service container; routing and views do
not change.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ...models import ProjectSecurityResult, ProjectSettings


class IProjectQueries(ABC):
    """Read access to content project settings."""

    @abstractmethod  # pragma: no cover
    def get_project_settings(self, project_id: Optional[str]) -> Optional[ProjectSettings]:
        """
        Return the settings of ``project_id``.

        An empty id resolves to the default project.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_default_project(self) -> Optional[ProjectSettings]:
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_projects_by_user(self, user_name: str) -> List[ProjectSettings]:
        raise NotImplementedError


class IProjectSecurityResolver(ABC):
    """Answers "may this user edit or view this project"."""

    @abstractmethod  # pragma: no cover
    def resolve(self, project_id: Optional[str] = None) -> ProjectSecurityResult:
        """
        Resolve the current request's user against a project.

        Returns:
            ProjectSecurityResult: project id actually used plus edit rights.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def validate_credentials(
        self, user_name: str, password: str, project_id: Optional[str] = None
    ) -> ProjectSecurityResult:
        """
        Resolve explicit credentials, as sent by remote publishing clients
        that do not carry the auth cookie.
        """
        raise NotImplementedError
