"""SimpleAuth-backed project security resolver."""

from __future__ import annotations

import logging
from typing import Optional

from flask_login import current_user

from ...core.authorization import BLOG_EDIT_POLICY, PAGE_EDIT_POLICY, PolicyRegistry
from ...models import ProjectSecurityResult
from ..simpleauth.user_store import SimpleAuthUserStore
from .interfaces import IProjectQueries, IProjectSecurityResolver

logger = logging.getLogger(__name__)


class SimpleAuthProjectSecurityResolver(IProjectSecurityResolver):
    def __init__(self, services) -> None:
        self.services = services

    @property
    def policies(self) -> PolicyRegistry:
        return self.services.get(PolicyRegistry)

    @property
    def project_queries(self) -> IProjectQueries:
        return self.services.get(IProjectQueries)

    def _resolve_for(self, principal, project_id: Optional[str]) -> ProjectSecurityResult:
        authenticated = bool(principal is not None and principal.is_authenticated)
        claimed_project = getattr(principal, "project_id", None) if authenticated else None

        if not project_id:
            project_id = claimed_project
        if not project_id:
            default = self.project_queries.get_default_project()
            project_id = default.project_id if default else ""

        result = ProjectSecurityResult(project_id=project_id or "", is_authenticated=authenticated)
        if not authenticated:
            return result

        result.display_name = principal.display_name
        if claimed_project and project_id and claimed_project.lower() != project_id.lower():
            logger.info("User %s is bound to project %s, not %s", principal.user_name, claimed_project, project_id)
            return result

        result.can_edit_posts = self.policies.authorize(principal, BLOG_EDIT_POLICY)
        result.can_edit_pages = self.policies.authorize(principal, PAGE_EDIT_POLICY)
        return result

    def resolve(self, project_id: Optional[str] = None) -> ProjectSecurityResult:
        return self._resolve_for(current_user, project_id)

    def validate_credentials(
        self, user_name: str, password: str, project_id: Optional[str] = None
    ) -> ProjectSecurityResult:
        principal = self.services.get(SimpleAuthUserStore).validate(user_name, password)
        if principal is None:
            return ProjectSecurityResult(project_id=project_id or "")
        return self._resolve_for(principal, project_id)
