"""Project settings served straight from the ``ContentProjects`` section."""

from typing import List, Optional

from ...models import ProjectSettings
from .interfaces import IProjectQueries


class ConfigProjectQueries(IProjectQueries):
    def __init__(self, services) -> None:
        self.services = services

    @property
    def projects(self) -> List[ProjectSettings]:
        return self.services.options("ContentProjects")

    def get_default_project(self) -> Optional[ProjectSettings]:
        projects = self.projects
        return projects[0] if projects else None

    def get_project_settings(self, project_id: Optional[str]) -> Optional[ProjectSettings]:
        if not project_id:
            return self.get_default_project()
        wanted = project_id.lower()
        for project in self.projects:
            if project.project_id.lower() == wanted:
                return project
        return None

    def get_projects_by_user(self, user_name: str) -> List[ProjectSettings]:
        # Every configured user may work in every configured project
        return list(self.projects)
