"""Presets selecting and configuring a color and a space strategy.

A preset is stored as TOML or JSON::

    [color]
    strategy = "hue"
    options = { saturation = 1.0, value = 1.0 }

    [space]
    strategy = "hilbert"
    options = { size = 512 }

Both sections are optional; missing options take their defaults.
"""

import json
import logging
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path

import tomli_w

from .color import ColorStrategy, HueColorStrategy
from .space import HilbertSpaceStrategy, LineSpaceStrategy, SpaceStrategy, SpaceStrategyAdapter

logger = logging.getLogger(__name__)

__all__ = [
    "PresetError",
    "ColorPreset",
    "SpacePreset",
    "Preset",
    "load_preset",
    "COLOR_DEFAULTS",
    "SPACE_DEFAULTS",
]

# Default options per strategy name
COLOR_DEFAULTS = {
    "hue": {"saturation": 1.0, "value": 1.0},
}

SPACE_DEFAULTS = {
    "hilbert": {"size": 512},
    "line": {"length": 8192},
}


class PresetError(ValueError):
    """Raised when a preset cannot be read or describes an invalid strategy."""

    def __init__(self, message, path=None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


def _resolve_options(kind, strategy, options, defaults):
    if not isinstance(strategy, str):
        raise PresetError(f"{kind} strategy must be a string, got {type(strategy).__name__}")
    if strategy not in defaults:
        known = ", ".join(sorted(defaults))
        raise PresetError(f"unknown {kind} strategy {strategy!r} (expected one of: {known})")
    if not isinstance(options, dict):
        raise PresetError(f"{kind} options must be a table, got {type(options).__name__}")
    unknown = set(options) - set(defaults[strategy])
    if unknown:
        raise PresetError(f"unknown {kind} option(s) for {strategy!r}: {', '.join(sorted(unknown))}")
    return {**defaults[strategy], **options}


@dataclass
class ColorPreset:
    """Selects a color strategy.

    Attributes:
        strategy: Strategy name, currently only "hue"
        options: Strategy parameters, completed with COLOR_DEFAULTS
    """

    strategy: str = "hue"
    options: dict = field(default_factory=dict)

    def __post_init__(self):
        self.options = _resolve_options("color", self.strategy, self.options, COLOR_DEFAULTS)

    def to_strategy(self) -> ColorStrategy:
        """Build a new color strategy from this preset."""
        logger.debug("ColorPreset.to_strategy(%s)", self.strategy)
        try:
            return HueColorStrategy(float(self.options["saturation"]), float(self.options["value"]))
        except (TypeError, ValueError) as e:
            raise PresetError(f"invalid hue options: {e}") from e


@dataclass
class SpacePreset:
    """Selects a space strategy.

    Attributes:
        strategy: Strategy name, "hilbert" or "line"
        options: Strategy parameters ("size" for hilbert, "length" for line)
    """

    strategy: str = "hilbert"
    options: dict = field(default_factory=dict)

    def __post_init__(self):
        self.options = _resolve_options("space", self.strategy, self.options, SPACE_DEFAULTS)

    def to_strategy(self) -> SpaceStrategy:
        """Build a new two-dimensional space strategy from this preset.

        A line is adapted into two dimensions so that it produces a one pixel
        high image.
        """
        logger.debug("SpacePreset.to_strategy(%s)", self.strategy)
        try:
            if self.strategy == "hilbert":
                return HilbertSpaceStrategy.from_size(int(self.options["size"]))
            return SpaceStrategyAdapter(LineSpaceStrategy(int(self.options["length"])), 2)
        except (TypeError, ValueError) as e:
            raise PresetError(f"invalid {self.strategy} options: {e}") from e


@dataclass
class Preset:
    """A color preset and a space preset."""

    color: ColorPreset = field(default_factory=ColorPreset)
    space: SpacePreset = field(default_factory=SpacePreset)

    @classmethod
    def from_dict(cls, data: dict) -> "Preset":
        if not isinstance(data, dict):
            raise PresetError(f"preset must be a table, got {type(data).__name__}")
        unknown = set(data) - {"color", "space"}
        if unknown:
            raise PresetError(f"unknown preset section(s): {', '.join(sorted(unknown))}")

        sections = {}
        for name, preset_class in (("color", ColorPreset), ("space", SpacePreset)):
            section = data.get(name, {})
            if not isinstance(section, dict):
                raise PresetError(f"[{name}] must be a table")
            extra = set(section) - {"strategy", "options"}
            if extra:
                raise PresetError(f"unknown key(s) in [{name}]: {', '.join(sorted(extra))}")
            sections[name] = preset_class(**section)
        return cls(**sections)

    def to_dict(self) -> dict:
        return asdict(self)

    def to_strategies(self) -> tuple[ColorStrategy, SpaceStrategy]:
        """Build a fresh (color, space) strategy pair for one pass."""
        return self.color.to_strategy(), self.space.to_strategy()

    def dumps(self, format="toml", pretty=False) -> str:
        """Serialize the preset.

        Args:
            format: "toml", "json" or "debug"
            pretty: Indent the output, TOML output is always one key per line
        """
        if format == "toml":
            return tomli_w.dumps(self.to_dict())
        if format == "json":
            return json.dumps(self.to_dict(), indent=2 if pretty else None)
        if format == "debug":
            if pretty:
                return f"Preset(\n    color={self.color!r},\n    space={self.space!r},\n)"
            return repr(self)
        raise ValueError(f"unsupported preset format: {format}")


def load_preset(path) -> Preset:
    """Load a preset from a TOML or JSON file.

    The format is chosen from the file extension; anything other than
    ".json" is read as TOML.
    """
    path = Path(path)
    logger.debug("load_preset(%s)", path)
    try:
        if path.suffix.lower() == ".json":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        else:
            with open(path, "rb") as f:
                data = tomllib.load(f)
    except OSError as e:
        raise PresetError(f"failed to read preset file: {e}", path) from e
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise PresetError(f"failed to parse preset file: {e}", path) from e

    try:
        return Preset.from_dict(data)
    except PresetError as e:
        raise PresetError(str(e), path) from e
