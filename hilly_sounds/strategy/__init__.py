"""Color and space strategies, and the presets that build them."""

from .color import ColorStrategy, HueColorStrategy
from .preset import ColorPreset, Preset, PresetError, SpacePreset, load_preset
from .space import HilbertSpaceStrategy, LineSpaceStrategy, SpaceStrategy, SpaceStrategyAdapter

__all__ = [
    "ColorStrategy",
    "HueColorStrategy",
    "SpaceStrategy",
    "SpaceStrategyAdapter",
    "HilbertSpaceStrategy",
    "LineSpaceStrategy",
    "ColorPreset",
    "SpacePreset",
    "Preset",
    "PresetError",
    "load_preset",
]
