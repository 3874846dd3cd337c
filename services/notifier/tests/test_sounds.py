"""
Tests for the gateway sound catalog.
"""

from __future__ import annotations

from notifier.gateway.sounds import DEFAULT_SOUNDS, SoundCatalog


class TestDefaults:

    def test_stock_list(self) -> None:
        catalog = SoundCatalog()
        assert len(catalog) == 22
        assert catalog["magic"] == "Magic"
        assert catalog["none"] == "None (silent)"

    def test_default_mapping_is_read_only(self) -> None:
        catalog = SoundCatalog()
        catalog.snapshot()["magic"] = "changed"
        assert catalog["magic"] == "Magic"
        assert DEFAULT_SOUNDS["magic"] == "Magic"

    def test_custom_initial_mapping(self) -> None:
        catalog = SoundCatalog({"beep": "Beep"})
        assert list(catalog) == ["beep"]


class TestLookup:

    def test_display_name_known(self) -> None:
        assert SoundCatalog().display_name("spacealarm") == "Space Alarm"

    def test_display_name_unknown_falls_back_to_id(self) -> None:
        assert SoundCatalog().display_name("kazoo") == "kazoo"

    def test_is_known(self) -> None:
        catalog = SoundCatalog()
        assert catalog.is_known("siren")
        assert catalog.is_known("")
        assert not catalog.is_known("kazoo")


class TestReplace:

    def test_replace_is_wholesale(self) -> None:
        catalog = SoundCatalog()
        assert catalog.replace({"beep": "Beep", "boop": "Boop"}) is True
        assert catalog.snapshot() == {"beep": "Beep", "boop": "Boop"}
        assert "magic" not in catalog

    def test_replace_rejects_non_mapping(self) -> None:
        catalog = SoundCatalog()
        assert catalog.replace(["beep"]) is False
        assert len(catalog) == 22

    def test_replace_rejects_empty(self) -> None:
        catalog = SoundCatalog()
        assert catalog.replace({}) is False
        assert "magic" in catalog

    def test_replace_stringifies(self) -> None:
        catalog = SoundCatalog()
        catalog.replace({"beep": 1})
        assert catalog["beep"] == "1"

    def test_snapshot_taken_before_replace_is_stable(self) -> None:
        catalog = SoundCatalog()
        before = catalog.snapshot()
        catalog.replace({"beep": "Beep"})
        assert "magic" in before
