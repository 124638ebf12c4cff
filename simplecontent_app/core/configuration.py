"""Layered site configuration.

Settings come from an ordered list of sources (JSON files, then environment
variables). Each source flattens into ``Section:Key`` pairs and later sources
override earlier ones key by key, so JSON arrays merge by index. Lookups are
case-insensitive. JSON sources can be watched for changes; the host calls
``reload_if_changed`` once per request.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Dict, List, Mapping, Optional, Tuple

from .error_handlers import ConfigurationError
from .signals import configuration_reloaded

logger = logging.getLogger(__name__)

KEY_DELIMITER = ":"


def _normalize(key: str) -> str:
    return key.lower()


def _scalar_to_string(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "True" if value else "False"
    return str(value)


def flatten(value, prefix: str = "") -> Dict[str, str]:
    """Flatten parsed JSON into ``Section:Key`` pairs with string leaves."""

    data: Dict[str, str] = {}
    if isinstance(value, dict):
        for key, child in value.items():
            path = f"{prefix}{KEY_DELIMITER}{key}" if prefix else str(key)
            data.update(flatten(child, path))
    elif isinstance(value, list):
        for index, child in enumerate(value):
            path = f"{prefix}{KEY_DELIMITER}{index}" if prefix else str(index)
            data.update(flatten(child, path))
    elif prefix:
        data[prefix] = _scalar_to_string(value)
    return data


class ConfigurationSource:
    """One layer of configuration."""

    watch = False

    def load(self) -> Dict[str, str]:
        raise NotImplementedError

    def fingerprint(self) -> Optional[float]:
        return None


class JsonFileSource(ConfigurationSource):
    def __init__(self, path: str, optional: bool = True, reload_on_change: bool = False) -> None:
        self.path = path
        self.optional = optional
        self.watch = reload_on_change

    def load(self) -> Dict[str, str]:
        if not os.path.isfile(self.path):
            if self.optional:
                logger.debug("Optional settings file %s not found, skipping", self.path)
                return {}
            raise ConfigurationError(f"Required settings file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8-sig") as handle:
                parsed = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON in {self.path}: {exc}") from exc

        logger.debug("Loaded settings file %s", self.path)
        return flatten(parsed)

    def fingerprint(self) -> Optional[float]:
        try:
            return os.path.getmtime(self.path)
        except OSError:
            return None

    def __repr__(self) -> str:
        return f"JsonFileSource({self.path!r})"


class EnvironmentVariablesSource(ConfigurationSource):
    """Environment variables, with ``__`` standing for the key delimiter."""

    def __init__(self, prefix: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> None:
        self.prefix = prefix
        self.environ = environ

    def load(self) -> Dict[str, str]:
        environ = self.environ if self.environ is not None else os.environ
        data: Dict[str, str] = {}
        for name, value in environ.items():
            if self.prefix:
                if not name.lower().startswith(self.prefix.lower()):
                    continue
                name = name[len(self.prefix):]
            if not name:
                continue
            data[name.replace("__", KEY_DELIMITER)] = value
        return data


class MemorySource(ConfigurationSource):
    def __init__(self, data: Mapping[str, str]) -> None:
        self.data = dict(data)

    def load(self) -> Dict[str, str]:
        return dict(self.data)


class ConfigurationSection:
    """A view of every key under ``path``."""

    def __init__(self, root: "ConfigurationRoot", path: str) -> None:
        self._root = root
        self.path = path

    @property
    def key(self) -> str:
        return self.path.rsplit(KEY_DELIMITER, 1)[-1]

    @property
    def value(self) -> Optional[str]:
        return self._root.get(self.path)

    def _child_path(self, key: str) -> str:
        return f"{self.path}{KEY_DELIMITER}{key}" if self.path else key

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._root.get(self._child_path(key), default)

    def get_section(self, key: str) -> "ConfigurationSection":
        return ConfigurationSection(self._root, self._child_path(key))

    def get_children(self) -> List["ConfigurationSection"]:
        return [ConfigurationSection(self._root, path) for path in self._root.child_paths(self.path)]

    def exists(self) -> bool:
        return self.value is not None or bool(self._root.child_paths(self.path))

    def __repr__(self) -> str:
        return f"ConfigurationSection({self.path!r})"


class ConfigurationRoot:
    def __init__(self, sources: List[ConfigurationSource]) -> None:
        self.sources = list(sources)
        self.version = 0
        self._data: Dict[str, Tuple[str, str]] = {}
        self._fingerprints: List[Optional[float]] = []
        self._load()

    def _load(self) -> None:
        data: Dict[str, Tuple[str, str]] = {}
        for source in self.sources:
            for key, value in source.load().items():
                data[_normalize(key)] = (key, value)
        self._data = data
        self._fingerprints = [source.fingerprint() if source.watch else None for source in self.sources]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        entry = self._data.get(_normalize(key))
        return entry[1] if entry is not None else default

    def __getitem__(self, key: str) -> Optional[str]:
        return self.get(key)

    def get_section(self, key: str) -> ConfigurationSection:
        return ConfigurationSection(self, key)

    def child_paths(self, path: str) -> List[str]:
        """Direct child paths of ``path``, numeric keys in index order."""

        prefix = _normalize(path) + KEY_DELIMITER if path else ""
        seen: Dict[str, str] = {}
        for normalized, (original, _value) in self._data.items():
            if not normalized.startswith(prefix):
                continue
            remainder = original[len(prefix):]
            child = remainder.split(KEY_DELIMITER, 1)[0]
            seen.setdefault(child.lower(), child)

        def sort_key(name: str):
            return (0, int(name), "") if name.isdigit() else (1, 0, name.lower())

        ordered = sorted(seen.values(), key=sort_key)
        return [f"{path}{KEY_DELIMITER}{child}" if path else child for child in ordered]

    def reload(self) -> None:
        self._load()
        self.version += 1
        logger.info("Configuration reloaded (version %s)", self.version)
        configuration_reloaded.send(self, version=self.version)

    def reload_if_changed(self) -> bool:
        """Reload when any watched file changed, appeared or disappeared.

        A reload that fails keeps the previous values; the broken file is not
        read again until it changes once more.
        """

        current = [source.fingerprint() if source.watch else None for source in self.sources]
        changed = [source for source, before, after in zip(self.sources, self._fingerprints, current) if before != after]
        if not changed:
            return False

        logger.debug("Settings sources %r changed on disk", changed)
        try:
            self.reload()
        except ConfigurationError:
            logger.exception("Settings reload failed; keeping configuration version %s", self.version)
            self._fingerprints = current
            return False
        return True


class ConfigurationBuilder:
    def __init__(self, base_path: str = ".") -> None:
        self.base_path = base_path
        self.sources: List[ConfigurationSource] = []

    def set_base_path(self, base_path: str) -> "ConfigurationBuilder":
        self.base_path = base_path
        return self

    def add_json_file(
        self, path: str, optional: bool = True, reload_on_change: bool = False
    ) -> "ConfigurationBuilder":
        full_path = path if os.path.isabs(path) else os.path.join(self.base_path, path)
        self.sources.append(JsonFileSource(full_path, optional=optional, reload_on_change=reload_on_change))
        return self

    def add_environment_variables(
        self, prefix: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
    ) -> "ConfigurationBuilder":
        self.sources.append(EnvironmentVariablesSource(prefix=prefix, environ=environ))
        return self

    def add_in_memory(self, data: Mapping[str, str]) -> "ConfigurationBuilder":
        self.sources.append(MemorySource(data))
        return self

    def add_source(self, source: ConfigurationSource) -> "ConfigurationBuilder":
        self.sources.append(source)
        return self

    def build(self) -> ConfigurationRoot:
        return ConfigurationRoot(self.sources)
