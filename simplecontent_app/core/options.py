"""Bind configuration sections to dataclasses.

Configuration keys are PascalCase (``UserName``) while fields are snake_case
(``user_name``); both sides are compared lower-cased with underscores removed.
"""

from __future__ import annotations

import dataclasses
import logging
import typing
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from .configuration import ConfigurationRoot, ConfigurationSection
from .error_handlers import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off", ""}


def _match_name(name: str) -> str:
    return name.replace("_", "").lower()


def _convert_scalar(raw: Optional[str], target: Any, path: str):
    if raw is None:
        return None
    try:
        if target is bool:
            lowered = raw.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(raw)
        if target is int:
            return int(raw)
        if target is float:
            return float(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"Cannot convert '{raw}' at '{path}' to {target.__name__}"
        ) from exc
    return raw


def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) is typing.Union:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _bind_value(section: ConfigurationSection, annotation: Any):
    annotation = _unwrap_optional(annotation)
    origin = typing.get_origin(annotation)

    if origin in (list, List):
        (item_type,) = typing.get_args(annotation) or (str,)
        # "a|b|c" is accepted for scalar lists set from a single value
        if not section.get_children() and section.value is not None and item_type is str:
            return [part.strip() for part in section.value.split("|") if part.strip()]
        return bind_list(section, item_type)

    if dataclasses.is_dataclass(annotation):
        return bind(section, annotation)

    return _convert_scalar(section.value, annotation, section.path)


def bind(section: ConfigurationSection, target_type: Type[T]) -> T:
    """Create ``target_type`` from the keys below ``section``."""

    hints = typing.get_type_hints(target_type)
    children: Dict[str, ConfigurationSection] = {
        _match_name(child.key): child for child in section.get_children()
    }

    values: Dict[str, Any] = {}
    for field in dataclasses.fields(target_type):
        child = children.get(_match_name(field.name))
        if child is None or not child.exists():
            continue
        value = _bind_value(child, hints.get(field.name, str))
        if value is not None:
            values[field.name] = value

    return target_type(**values)


def bind_list(section: ConfigurationSection, item_type: Any) -> List[Any]:
    """Bind each child of ``section`` (index order) to ``item_type``."""

    return [_bind_value(child, item_type) for child in section.get_children()]


class OptionsMonitor:
    """Lazily re-binds a section whenever the configuration version changes."""

    def __init__(
        self,
        configuration: ConfigurationRoot,
        section_key: str,
        binder: Callable[[ConfigurationSection], Any],
    ) -> None:
        self.configuration = configuration
        self.section_key = section_key
        self.binder = binder
        self._version: Optional[int] = None
        self._value: Any = None

    @classmethod
    def for_type(cls, configuration: ConfigurationRoot, section_key: str, target_type: type) -> "OptionsMonitor":
        return cls(configuration, section_key, lambda section: bind(section, target_type))

    @classmethod
    def for_list(cls, configuration: ConfigurationRoot, section_key: str, item_type: type) -> "OptionsMonitor":
        return cls(configuration, section_key, lambda section: bind_list(section, item_type))

    @property
    def current_value(self) -> Any:
        if self._version != self.configuration.version:
            self._value = self.binder(self.configuration.get_section(self.section_key))
            self._version = self.configuration.version
            logger.debug("Bound options section %s (version %s)", self.section_key, self._version)
        return self._value
