import pytest

from explorer.discovery.presets import DEFAULT_PRESETS, PresetRegistry, UnknownPreset
from explorer.discovery.schemas import Preset


def test_default_presets_keep_their_order():
    registry = PresetRegistry()

    assert [p.id for p in registry.list_presets()] == [p.id for p in DEFAULT_PRESETS]


def test_select_returns_query_and_sort_override():
    registry = PresetRegistry()

    assert registry.select("sorties-marquantes") == ("subject:fiction france orderBy=newest", "date-desc")
    assert registry.select("best-sellers-france") == ("subject:fiction france best sellers", None)


def test_selecting_twice_is_idempotent():
    registry = PresetRegistry()

    assert registry.select("fantasy-francophone") == registry.select("fantasy-francophone")


def test_unknown_preset_raises():
    with pytest.raises(UnknownPreset):
        PresetRegistry().select("nope")


def test_duplicate_ids_are_rejected():
    preset = Preset(id="x", label="X", directive_query="x")

    with pytest.raises(ValueError):
        PresetRegistry([preset, preset])
