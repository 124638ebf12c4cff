"""Conventional ``{controller}/{action}`` routing on top of Flask.

Blueprint routes keep their Werkzeug rules. Everything else is caught by a
single fallback rule and dispatched through an ordered ``RouteTable``: the
first route whose template matches *and* names a registered controller action
handles the request.
"""

from __future__ import annotations

import inspect
import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Type
from urllib.parse import urlencode

from flask import Flask, abort, current_app, g, request
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)

_PARAMETER = re.compile(r"^\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?:(?P<optional>\?)|=(?P<default>[^}]*))?\}$")

# Route values whose text is compared and emitted lower-cased
_LOWERCASE_VALUES = ("controller", "action")

DISPATCH_ENDPOINTS = ("conventional_root", "conventional")


@dataclass(frozen=True)
class TemplateSegment:
    literal: Optional[str] = None
    name: Optional[str] = None
    default: Optional[str] = None
    optional: bool = False

    @property
    def is_parameter(self) -> bool:
        return self.name is not None

    @property
    def can_be_omitted(self) -> bool:
        return self.optional or self.default is not None


def _split(path: str) -> List[str]:
    return [segment for segment in path.strip("/").split("/") if segment]


def parse_template(template: str) -> List[TemplateSegment]:
    segments: List[TemplateSegment] = []
    for raw in _split(template):
        if raw.startswith("{"):
            match = _PARAMETER.match(raw)
            if match is None:
                raise ValueError(f"Invalid route parameter '{raw}' in template '{template}'")
            segments.append(
                TemplateSegment(
                    name=match.group("name").lower(),
                    default=match.group("default"),
                    optional=bool(match.group("optional")),
                )
            )
        else:
            segments.append(TemplateSegment(literal=raw))
    return segments


class RouteTemplate:
    def __init__(self, name: str, template: str) -> None:
        self.name = name
        self.template = template
        self.segments = parse_template(template)

    @property
    def parameter_names(self) -> List[str]:
        return [segment.name for segment in self.segments if segment.is_parameter]

    def match(self, path: str) -> Optional[Dict[str, Optional[str]]]:
        parts = _split(path)
        if len(parts) > len(self.segments):
            return None

        values: Dict[str, Optional[str]] = {}
        for index, segment in enumerate(self.segments):
            if index < len(parts):
                part = parts[index]
                if segment.literal is not None:
                    if part.lower() != segment.literal.lower():
                        return None
                    continue
                values[segment.name] = part
                continue

            if segment.literal is not None or not segment.can_be_omitted:
                return None
            values[segment.name] = segment.default

        for key in _LOWERCASE_VALUES:
            if values.get(key):
                values[key] = values[key].lower()
        return values

    def build_candidates(self, values: Dict[str, Optional[str]]) -> List[Tuple[str, Dict[str, str]]]:
        """Every ``(path, leftover_values)`` this route can produce, longest first.

        Trailing segments equal to their default, or absent optional ones, may
        be dropped one at a time.
        """

        normalized = {key.lower(): value for key, value in values.items() if value is not None}
        parts: List[Tuple[str, TemplateSegment]] = []
        for segment in self.segments:
            if segment.literal is not None:
                parts.append((segment.literal, segment))
                continue
            value = normalized.get(segment.name)
            if value is None:
                if segment.can_be_omitted:
                    value = segment.default
                if value is None:
                    if segment.optional:
                        parts.append(("", segment))
                        continue
                    return []
            parts.append((str(value), segment))

        leftovers = {
            key: str(value) for key, value in normalized.items() if key not in self.parameter_names
        }

        candidates: List[Tuple[str, Dict[str, str]]] = []
        while True:
            if not any(text == "" for text, _segment in parts):
                path = "/" + "/".join(text for text, _segment in parts).lower()
                candidates.append((path, dict(leftovers)))
            if not parts:
                break
            text, segment = parts[-1]
            if not segment.is_parameter or not (
                text == "" or (segment.default is not None and text.lower() == segment.default.lower())
            ):
                break
            parts.pop()
        return candidates

    def build(self, values: Dict[str, Optional[str]]) -> Optional[Tuple[str, Dict[str, str]]]:
        """The shortest ``(path, leftover_values)``, or ``None`` when a value is missing."""

        candidates = self.build_candidates(values)
        return candidates[-1] if candidates else None

    def __repr__(self) -> str:
        return f"RouteTemplate({self.name!r}, {self.template!r})"


def action(methods: Sequence[str] = ("GET",), name: Optional[str] = None):
    """Mark a controller method as a routable action."""

    def decorator(f: Callable) -> Callable:
        f._action_methods = tuple(method.upper() for method in methods)
        f._action_name = (name or f.__name__).lower()
        return f
    return decorator


class Controller:
    """Base class for conventional controllers; one instance per dispatch."""

    name: str = ""

    def __init__(self, services) -> None:
        self.services = services

    @classmethod
    def actions(cls) -> Dict[str, Callable]:
        found: Dict[str, Callable] = {}
        for attribute in dir(cls):
            member = getattr(cls, attribute)
            action_name = getattr(member, "_action_name", None)
            if action_name:
                found[action_name] = member
        return found


class ControllerRegistry:
    def __init__(self) -> None:
        self._controllers: Dict[str, Type[Controller]] = {}

    def register(self, controller_cls: Type[Controller], name: Optional[str] = None) -> Type[Controller]:
        controller_name = (name or controller_cls.name or controller_cls.__name__.replace("Controller", "")).lower()
        self._controllers[controller_name] = controller_cls
        return controller_cls

    def find_action(self, controller: Optional[str], action_name: Optional[str]):
        if not controller or not action_name:
            return None
        controller_cls = self._controllers.get(controller.lower())
        if controller_cls is None:
            return None
        method = controller_cls.actions().get(action_name.lower())
        if method is None:
            return None
        return controller_cls, method

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._controllers


def _call_action(controller_cls: Type[Controller], method: Callable, values: Dict[str, Optional[str]]):
    controller = controller_cls(current_app.extensions["services"])
    signature = inspect.signature(method)
    accepts_any = any(param.kind is param.VAR_KEYWORD for param in signature.parameters.values())
    kwargs = {
        key: value
        for key, value in values.items()
        if key not in ("controller", "action") and (accepts_any or key in signature.parameters)
    }
    return method(controller, **kwargs)


def _reaches_dispatcher(path: str) -> bool:
    """False when a blueprint rule claims ``path`` before the fallback does."""

    adapter = current_app.url_map.bind("localhost")
    try:
        endpoint, _arguments = adapter.match(path, method="GET")
    except HTTPException:
        return True
    return endpoint in DISPATCH_ENDPOINTS


def _blueprint_owner(path: str) -> Optional[set]:
    """Methods of the blueprint rules matching ``path``, or None when there are none."""

    adapter = current_app.url_map.bind("localhost")
    methods: set = set()
    for method in ("GET", "POST", "PUT", "PATCH", "DELETE"):
        try:
            rule, _arguments = adapter.match(path, method=method, return_rule=True)
        except HTTPException:
            continue
        if rule.endpoint not in DISPATCH_ENDPOINTS:
            methods.update(rule.methods or ())
    return methods or None


class RouteTable:
    def __init__(self, controllers: ControllerRegistry) -> None:
        self.controllers = controllers
        self.routes: List[RouteTemplate] = []

    def map_route(self, name: str, template: str) -> RouteTemplate:
        route = RouteTemplate(name, template)
        self.routes.append(route)
        logger.debug("Mapped route %s -> %s", name, template)
        return route

    def resolve(self, path: str):
        """Return ``(route, values, controller_cls, method)`` for the first usable route."""

        for route in self.routes:
            values = route.match(path)
            if values is None:
                continue
            found = self.controllers.find_action(values.get("controller"), values.get("action"))
            if found is None:
                continue
            return (route, values) + found
        return None

    def dispatch(self, path: str, method: Optional[str] = None):
        resolved = self.resolve(path)
        if resolved is None:
            abort(404)

        route, values, controller_cls, action_method = resolved
        http_method = (method or request.method).upper()
        allowed = action_method._action_methods
        if http_method == "HEAD" and "GET" in allowed:
            http_method = "GET"
        if http_method not in allowed:
            abort(405, valid_methods=list(allowed))

        g.route_name = route.name
        g.route_values = values
        return _call_action(controller_cls, action_method, values)

    def url_for_action(self, controller: str, action_name: str = "index", **values) -> str:
        """URL for the action with the fewest query values, shortest path first.

        Extra values become the query string.
        """

        route_values = dict(values, controller=controller.lower(), action=action_name.lower())
        target = self.controllers.find_action(controller, action_name)
        candidates: List[Tuple[str, Dict[str, str]]] = []
        for route in self.routes:
            for path, leftovers in route.build_candidates(route_values):
                leftovers.pop("controller", None)
                leftovers.pop("action", None)
                resolved = self.resolve(path)
                if resolved is None or resolved[2:] != target:
                    continue
                if not _reaches_dispatcher(path):
                    continue
                candidates.append((path, leftovers))

        if not candidates:
            raise LookupError(f"No route can produce a URL for {controller}/{action_name}")

        path, leftovers = min(candidates, key=lambda candidate: (len(candidate[1]), len(candidate[0])))
        if leftovers:
            path = f"{path}?{urlencode(sorted(leftovers.items()))}"
        return path


def register_route_table(app: Flask, route_table: RouteTable) -> None:
    """Attach the route table as the fallback for paths no blueprint claims."""

    def conventional_dispatch(path: str = ""):
        full_path = "/" + path
        owner = _blueprint_owner(full_path)
        if owner is not None:
            # a blueprint rule owns the path but not this method
            abort(405, valid_methods=sorted(owner))
        return route_table.dispatch(full_path)

    methods = ["GET", "POST", "PUT", "PATCH", "DELETE"]
    root_taken = any(rule.rule == "/" for rule in app.url_map.iter_rules())
    if not root_taken:
        app.add_url_rule("/", DISPATCH_ENDPOINTS[0], conventional_dispatch, methods=methods)
    app.add_url_rule("/<path:path>", DISPATCH_ENDPOINTS[1], conventional_dispatch, methods=methods)

    app.extensions["route_table"] = route_table

    @app.context_processor
    def inject_action_url():
        return {"action_url": route_table.url_for_action}
