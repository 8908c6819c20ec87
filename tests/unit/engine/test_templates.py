"""Tests for the party template catalog."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shot_roster.core.exceptions import InvalidTemplateKeyError
from shot_roster.engine.templates import (
    get_template,
    is_valid_template,
    list_templates,
    template_keys,
)
from shot_roster.models.enums import SlotRole


class TestCatalog:
    """Tests for catalog listing."""

    def test_sorted_by_name(self) -> None:
        """Test templates are listed by display name."""
        names = [template.name for template in list_templates()]
        assert names == sorted(names)
        assert len(names) == 8

    def test_keys(self) -> None:
        """Test the known keys are exposed."""
        assert template_keys() == [
            "ambush",
            "boss_fight",
            "escort",
            "featured_foes",
            "mixed_threat",
            "mook_horde",
            "simple_encounter",
            "uber_boss",
        ]

    def test_listing_is_a_copy(self) -> None:
        """Test mutating a listing does not affect the catalog."""
        listing = list_templates()
        listing.clear()
        assert len(list_templates()) == 8

    def test_templates_frozen(self) -> None:
        """Test templates cannot be modified in place."""
        template = get_template("ambush")
        with pytest.raises(ValidationError):
            template.name = "Changed"


class TestGetTemplate:
    """Tests for template lookup."""

    def test_boss_fight(self) -> None:
        """Test the boss fight blueprint order and mook counts."""
        template = get_template("boss_fight")

        assert template.name == "Boss Fight"
        assert [slot.role for slot in template.slots] == [
            SlotRole.BOSS,
            SlotRole.FEATURED_FOE,
            SlotRole.FEATURED_FOE,
            SlotRole.MOOK,
        ]
        assert [slot.default_mook_count for slot in template.slots] == [None, None, None, 12]

    def test_uber_boss(self) -> None:
        """Test the uber-boss template carries its elite guard count."""
        template = get_template("uber_boss")

        assert len(template.slots) == 5
        assert template.slots[-1].label == "Elite Guards"
        assert template.slots[-1].default_mook_count == 20

    @pytest.mark.parametrize("key", ["nonexistent", "", "Boss_Fight", None, 7])
    def test_unknown_key(self, key: object) -> None:
        """Test unknown keys raise InvalidTemplateKeyError."""
        with pytest.raises(InvalidTemplateKeyError):
            get_template(key)

        assert is_valid_template(key) is False

    def test_is_valid(self) -> None:
        """Test every listed key validates."""
        assert all(is_valid_template(key) for key in template_keys())
