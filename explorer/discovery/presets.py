"""
Named query shortcuts offered next to the search box.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from .schemas import Preset, SortMode


DEFAULT_PRESETS: List[Preset] = [
    Preset(
        id="best-sellers-france",
        label="Best-sellers France",
        directive_query="subject:fiction france best sellers",
    ),
    Preset(
        id="sorties-marquantes",
        label="Sorties marquantes",
        directive_query="subject:fiction france orderBy=newest",
        default_sort_mode="date-desc",
    ),
    Preset(
        id="fantasy-francophone",
        label="Fantasy francophone",
        directive_query="subject:fantasy language:fr",
        default_sort_mode="rating-desc",
    ),
]


class UnknownPreset(KeyError):
    """No preset is registered under the requested id."""


class PresetRegistry:
    """Read-only, ordered catalogue of presets."""

    def __init__(self, presets: Optional[Iterable[Preset]] = None) -> None:
        self._presets: Dict[str, Preset] = {}
        for preset in DEFAULT_PRESETS if presets is None else presets:
            if preset.id in self._presets:
                raise ValueError(f"Duplicate preset id: {preset.id}")
            self._presets[preset.id] = preset

    def list_presets(self) -> List[Preset]:
        return list(self._presets.values())

    def get(self, preset_id: str) -> Preset:
        try:
            return self._presets[preset_id]
        except KeyError:
            raise UnknownPreset(preset_id) from None

    def select(self, preset_id: str) -> Tuple[str, Optional[SortMode]]:
        """Return the query text and sort override bound to ``preset_id``."""
        preset = self.get(preset_id)
        return preset.directive_query, preset.default_sort_mode
