"""Layered YAML settings for the scanner.

``settings.yaml`` ships with the package. An optional ``settings.local.yaml``
beside it is merged on top, key by key, so a developer can change one
scanner knob without restating the rest. String values of the exact form
``${NAME}`` or ``${NAME:fallback}`` are then replaced from the environment,
after ``.env`` has been loaded.
"""

import os
import re
from pathlib import Path
from typing import Any, cast

import yaml
from dotenv import load_dotenv

_PACKAGE_CONFIG_DIR = Path(__file__).parent.parent / "config"
_LAYERS = ("settings.yaml", "settings.local.yaml")
_WHOLE_REF = re.compile(r"^\$\{([^}:]+)(?::([^}]*))?\}$")
_ANY_REF = re.compile(r"\$\{[^}]+\}")


class ConfigError(Exception):
    """Raise when the settings files cannot be resolved."""


def _read_layer(path: Path) -> dict[str, Any]:
    """Parse one YAML layer, treating a missing or empty file as no overrides."""
    if not path.exists():
        return {}
    with path.open() as fh:
        return cast("dict[str, Any]", yaml.safe_load(fh) or {})


def _overlay(target: dict[str, Any], layer: dict[str, Any]) -> None:
    """Apply ``layer`` onto ``target`` in place, recursing into shared mappings."""
    for key, incoming in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(incoming, dict):
            _overlay(cast("dict[str, Any]", current), cast("dict[str, Any]", incoming))
        else:
            target[key] = incoming


def _expand(node: Any) -> Any:
    """Replace environment references throughout a parsed settings tree.

    Raises:
        ConfigError: A whole-value reference names an unset variable with no
            fallback, or a reference sits inside a longer string.

    """
    if isinstance(node, dict):
        tree = cast("dict[str, Any]", node)
        return {key: _expand(value) for key, value in tree.items()}
    if isinstance(node, list):
        return [_expand(item) for item in cast("list[Any]", node)]
    if not isinstance(node, str):
        return node

    whole = _WHOLE_REF.match(node)
    if whole is not None:
        name, fallback = whole.group(1), whole.group(2)
        resolved = os.getenv(name, fallback)
        if resolved is None:
            msg = f"Required environment variable ${{{name}}} is not set and has no default"
            raise ConfigError(msg)
        return resolved
    if _ANY_REF.search(node):
        msg = f"Unresolved environment variable reference in: {node}"
        raise ConfigError(msg)
    return node


class ConfigLoader:
    """Read-only view over the merged scanner settings."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Load ``.env`` and then every settings layer found in ``config_dir``.

        Args:
            config_dir: Folder holding the YAML layers. Defaults to the
                ``config`` folder shipped inside the package.

        """
        load_dotenv()
        self.config_dir = Path(config_dir) if config_dir is not None else _PACKAGE_CONFIG_DIR
        merged: dict[str, Any] = {}
        for filename in _LAYERS:
            _overlay(merged, _read_layer(self.config_dir / filename))
        self._settings = cast("dict[str, Any]", _expand(merged))

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``scanner.batch_size``.

        Returns ``default`` when any segment is missing, null, or sits under a
        non-mapping value.
        """
        node: Any = self._settings
        for part in key.split("."):
            if not isinstance(node, dict):
                return default
            node = cast("dict[str, Any]", node).get(part)
            if node is None:
                return default
        return node

    def get_section(self, name: str) -> dict[str, Any]:
        """Return the mapping stored under ``name``, or ``{}`` when it is absent.

        Raises:
            ConfigError: The key exists but holds a scalar or list.

        """
        section: Any = self.get(name, {})
        if not isinstance(section, dict):
            msg = f"{name} config must be a dict, got {type(section).__name__}"
            raise ConfigError(msg)
        return cast("dict[str, Any]", section)


_config: ConfigLoader | None = None


def get_config() -> ConfigLoader:
    """Return the process-wide settings, loading them on first access."""
    global _config  # noqa: PLW0603
    if _config is None:
        _config = ConfigLoader()
    return _config
