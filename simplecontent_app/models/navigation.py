from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

PUBLIC_ROLE = "All Users"


@dataclass
class NavigationOptions:
    navigation_map_json_file_name: str = "navigation.json"


@dataclass
class NavigationNode:
    key: str = ""
    text: str = ""
    url: str = ""
    view_roles: str = ""
    children: List["NavigationNode"] = field(default_factory=list)

    def role_list(self) -> List[str]:
        return [role.strip() for role in self.view_roles.split(";") if role.strip()]

    def is_public(self) -> bool:
        roles = self.role_list()
        return not roles or any(role.lower() == PUBLIC_ROLE.lower() for role in roles)
