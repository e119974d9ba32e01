"""Engine configuration loaded from ``techtree.toml``.

Example::

    [unlock]
    deps_threshold = 1.0
    cluster_unlock_threshold = 75

    [layout]
    direction = "LR"
    size_variant = "compact"
    node_spacing_multiplier = 1.2
    expanded_spacing = false
    focused_cluster = "C3"
    on_cycle = "break"

    [geometry]
    cluster_style = "blurred-bubble"
    padding = 36
    radius = 24
    label_position = "top-left"
    zoom = 1.0
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .layout.layered import LayoutOptions
from .models import ClusterStyle, Direction, LabelPosition, SizeVariant

CONFIG_FILENAME = "techtree.toml"


@dataclass(frozen=True)
class EngineConfig:
    deps_threshold: float = 1.0
    cluster_unlock_threshold: float = 100.0
    direction: Direction = Direction.TB
    size_variant: SizeVariant = SizeVariant.STANDARD
    node_spacing_multiplier: float = 1.0
    expanded_spacing: bool = False
    focused_cluster: str | None = None
    on_cycle: str = "error"
    cluster_style: ClusterStyle = ClusterStyle.CONVEX_HULL_POLYGON
    padding: float | None = None  # None: use the cluster style padding
    radius: float = 24.0
    label_position: LabelPosition = LabelPosition.TOP_CENTER
    zoom: float = 1.0

    def layout_options(self, **overrides: Any) -> LayoutOptions:
        values = {
            "node_spacing_multiplier": self.node_spacing_multiplier,
            "expanded_spacing": self.expanded_spacing,
            "focused_cluster": self.focused_cluster,
            "on_cycle": self.on_cycle,
        }
        values.update(overrides)
        return LayoutOptions(**values)


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _number(key: str, value: Any, *, low: float | None = None, high: float | None = None) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(key, f"expected a number, got {value!r}")
    if low is not None and value < low:
        raise ConfigError(key, f"must be >= {low}")
    if high is not None and value > high:
        raise ConfigError(key, f"must be <= {high}")
    return float(value)


def _choice(key: str, value: Any, enum: type[Enum]) -> Any:
    try:
        return enum(value)
    except ValueError:
        allowed = ", ".join(str(m.value) for m in enum)
        raise ConfigError(key, f"expected one of {allowed}, got {value!r}") from None


def config_from_dict(data: dict[str, Any]) -> EngineConfig:
    """Validate the ``[unlock]``, ``[layout]`` and ``[geometry]`` tables."""
    unlock = _coerce_dict(data.get("unlock"))
    layout = _coerce_dict(data.get("layout"))
    geometry = _coerce_dict(data.get("geometry"))

    known = {f.name for f in fields(EngineConfig)}
    for table_name, table in (("unlock", unlock), ("layout", layout), ("geometry", geometry)):
        for key in table:
            if key not in known:
                raise ConfigError(f"{table_name}.{key}", "unknown setting")

    values: dict[str, Any] = {}
    if "deps_threshold" in unlock:
        values["deps_threshold"] = _number("unlock.deps_threshold", unlock["deps_threshold"], low=0.0, high=1.0)
    if "cluster_unlock_threshold" in unlock:
        values["cluster_unlock_threshold"] = _number(
            "unlock.cluster_unlock_threshold", unlock["cluster_unlock_threshold"], low=0.0, high=100.0
        )

    if "direction" in layout:
        values["direction"] = _choice("layout.direction", layout["direction"], Direction)
    if "size_variant" in layout:
        values["size_variant"] = _choice("layout.size_variant", layout["size_variant"], SizeVariant)
    if "node_spacing_multiplier" in layout:
        multiplier = _number("layout.node_spacing_multiplier", layout["node_spacing_multiplier"])
        if multiplier <= 0:
            raise ConfigError("layout.node_spacing_multiplier", "must be positive")
        values["node_spacing_multiplier"] = multiplier
    if "expanded_spacing" in layout:
        if not isinstance(layout["expanded_spacing"], bool):
            raise ConfigError("layout.expanded_spacing", "expected true or false")
        values["expanded_spacing"] = layout["expanded_spacing"]
    if "focused_cluster" in layout:
        focused = layout["focused_cluster"]
        values["focused_cluster"] = str(focused).strip() or None
    if "on_cycle" in layout:
        if layout["on_cycle"] not in ("error", "break"):
            raise ConfigError("layout.on_cycle", "expected 'error' or 'break'")
        values["on_cycle"] = layout["on_cycle"]

    if "cluster_style" in geometry:
        values["cluster_style"] = _choice("geometry.cluster_style", geometry["cluster_style"], ClusterStyle)
    if "padding" in geometry:
        values["padding"] = _number("geometry.padding", geometry["padding"], low=0.0)
    if "radius" in geometry:
        values["radius"] = _number("geometry.radius", geometry["radius"], low=0.0)
    if "label_position" in geometry:
        values["label_position"] = _choice("geometry.label_position", geometry["label_position"], LabelPosition)
    if "zoom" in geometry:
        zoom = _number("geometry.zoom", geometry["zoom"])
        if zoom <= 0:
            raise ConfigError("geometry.zoom", "must be positive")
        values["zoom"] = zoom

    return EngineConfig(**values)


def load_config(path: Path | None) -> EngineConfig:
    """Load configuration from TOML; defaults when the file does not exist."""
    import tomllib

    if path is None or not path.exists():
        return EngineConfig()
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(str(path), f"invalid TOML ({e})") from e
    return config_from_dict(data)
