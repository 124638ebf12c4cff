"""Site navigation tree loaded from a JSON map and filtered per viewer."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

from ...core.configuration import ConfigurationBuilder, flatten
from ...core.error_handlers import ConfigurationError
from ...core.options import bind
from ...models import NavigationNode, NavigationOptions

logger = logging.getLogger(__name__)


class NavigationService:
    def __init__(self, services, content_root: str) -> None:
        self.services = services
        self.content_root = content_root
        self._cache_key: Optional[tuple] = None
        self._tree: List[NavigationNode] = []

    @property
    def options(self) -> NavigationOptions:
        return self.services.options("NavigationOptions")

    def _map_path(self) -> str:
        file_name = self.options.navigation_map_json_file_name
        if os.path.isabs(file_name):
            return file_name
        return os.path.join(self.content_root, file_name)

    def load_tree(self) -> List[NavigationNode]:
        """Parse the map file; re-read only when its path or mtime changes."""

        path = self._map_path()
        try:
            mtime = os.path.getmtime(path)
        except OSError:
            logger.debug("Navigation map %s not found, using an empty tree", path)
            self._cache_key = None
            self._tree = []
            return self._tree

        cache_key = (path, mtime)
        if cache_key == self._cache_key:
            return self._tree

        try:
            with open(path, "r", encoding="utf-8-sig") as handle:
                parsed: Any = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid navigation map {path}: {exc}") from exc

        nodes = parsed if isinstance(parsed, list) else [parsed]
        self._tree = [
            bind(ConfigurationBuilder().add_in_memory(flatten(node)).build().get_section(""), NavigationNode)
            for node in nodes
        ]
        self._cache_key = cache_key
        logger.info("Loaded navigation map %s (%s root nodes)", path, len(self._tree))
        return self._tree

    @staticmethod
    def _can_view(node: NavigationNode, principal) -> bool:
        if node.is_public():
            return True
        if principal is None or not getattr(principal, "is_authenticated", False):
            return False
        held = {role.lower() for role in getattr(principal, "roles", ())}
        return any(role.lower() in held for role in node.role_list())

    def _filter(self, nodes: List[NavigationNode], principal) -> List[NavigationNode]:
        visible: List[NavigationNode] = []
        for node in nodes:
            if not self._can_view(node, principal):
                continue
            visible.append(NavigationNode(
                key=node.key,
                text=node.text,
                url=node.url,
                view_roles=node.view_roles,
                children=self._filter(node.children, principal),
            ))
        return visible

    def visible_nodes(self, principal) -> List[NavigationNode]:
        return self._filter(self.load_tree(), principal)
