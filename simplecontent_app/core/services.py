"""A small service container for the composition root.

Services are registered against a key (usually an abstract base class) with
one of three lifetimes. Scoped instances live for one request and are cached
on ``flask.g``; outside a request a scoped service behaves like a transient.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

from flask import current_app, g, has_app_context

from .error_handlers import ServiceNotRegisteredError
from .options import OptionsMonitor

logger = logging.getLogger(__name__)

SINGLETON = "singleton"
SCOPED = "scoped"
TRANSIENT = "transient"

Factory = Callable[["ServiceProvider"], Any]


def _describe(key: Hashable) -> str:
    return getattr(key, "__name__", repr(key))


@dataclass(frozen=True)
class ServiceDescriptor:
    key: Hashable
    lifetime: str
    factory: Factory


class ServiceCollection:
    def __init__(self) -> None:
        self._descriptors: Dict[Hashable, ServiceDescriptor] = {}
        self._options: Dict[str, OptionsMonitor] = {}

    def _add(self, key: Hashable, lifetime: str, factory: Factory) -> "ServiceCollection":
        if key in self._descriptors:
            logger.debug("Replacing registration for %s", _describe(key))
        self._descriptors[key] = ServiceDescriptor(key, lifetime, factory)
        return self

    def add_singleton(self, key: Hashable, factory_or_instance: Any) -> "ServiceCollection":
        if callable(factory_or_instance) and not isinstance(factory_or_instance, type):
            return self._add(key, SINGLETON, factory_or_instance)
        if isinstance(factory_or_instance, type):
            cls = factory_or_instance
            return self._add(key, SINGLETON, lambda provider: cls(provider))
        instance = factory_or_instance
        return self._add(key, SINGLETON, lambda provider: instance)

    def add_scoped(self, key: Hashable, factory: Factory) -> "ServiceCollection":
        return self._add(key, SCOPED, factory)

    def add_transient(self, key: Hashable, factory: Factory) -> "ServiceCollection":
        return self._add(key, TRANSIENT, factory)

    def configure(self, name: str, monitor: OptionsMonitor) -> "ServiceCollection":
        self._options[name] = monitor
        return self

    def __contains__(self, key: Hashable) -> bool:
        return key in self._descriptors

    def build_provider(self) -> "ServiceProvider":
        return ServiceProvider(dict(self._descriptors), dict(self._options))


class ServiceProvider:
    def __init__(self, descriptors: Dict[Hashable, ServiceDescriptor], options: Dict[str, OptionsMonitor]) -> None:
        self._descriptors = descriptors
        self._options = options
        self._singletons: Dict[Hashable, Any] = {}

    def _scope(self) -> Optional[Dict[Hashable, Any]]:
        if not has_app_context():
            return None
        scope = g.get("_service_scope")
        if scope is None:
            scope = {}
            g._service_scope = scope
        return scope

    def get(self, key: Hashable) -> Any:
        descriptor = self._descriptors.get(key)
        if descriptor is None:
            raise ServiceNotRegisteredError(f"No service registered for {_describe(key)}")

        if descriptor.lifetime == SINGLETON:
            if key not in self._singletons:
                self._singletons[key] = descriptor.factory(self)
            return self._singletons[key]

        if descriptor.lifetime == SCOPED:
            scope = self._scope()
            if scope is None:
                return descriptor.factory(self)
            if key not in scope:
                scope[key] = descriptor.factory(self)
            return scope[key]

        return descriptor.factory(self)

    def get_optional(self, key: Hashable, default: Any = None) -> Any:
        if key not in self._descriptors:
            return default
        return self.get(key)

    def options(self, name: str) -> Any:
        monitor = self._options.get(name)
        if monitor is None:
            raise ServiceNotRegisteredError(f"No options configured under '{name}'")
        return monitor.current_value


def get_service(key: Hashable) -> Any:
    """Resolve a service through the current app's provider."""

    return current_app.extensions["services"].get(key)

