"""
test_loaders.py — Technology catalog and event pool loaders.
"""

import json

import pytest

from civsim.models import Era, EventType, TechBranch
from civsim.utils.data_loader import (
    CatalogError,
    load_event_pool,
    parse_event_definition,
    read_catalog,
)
from civsim.utils.tech_loader import load_technologies, parse_technology


def write_catalog(path, entries):
    path.write_text(json.dumps(entries), encoding="utf-8")
    return path


class TestTechnologyCatalog:
    def test_bundled_catalog(self):
        technologies = load_technologies()

        assert len(technologies) == 30
        assert technologies[0].name == "Writing"
        assert technologies[-1].name == "Interstellar Drive"
        assert not any(tech.researched for tech in technologies)

    def test_six_per_branch(self):
        technologies = load_technologies()
        for branch in TechBranch:
            assert sum(1 for tech in technologies if tech.branch == branch) == 6

    def test_parse_entry(self):
        tech = parse_technology(
            {
                "name": "Astronomy",
                "branch": "space",
                "required_level": 2,
                "cost": 60,
                "description": "Understanding the cosmos",
            }
        )
        assert tech.branch == TechBranch.SPACE
        assert tech.required_level == 2
        assert tech.cost == 60

    def test_unknown_branch(self):
        with pytest.raises(CatalogError, match="Unknown branch 'magic'"):
            parse_technology(
                {
                    "name": "Alchemy",
                    "branch": "magic",
                    "required_level": 1,
                    "cost": 10,
                    "description": "",
                }
            )

    @pytest.mark.parametrize("level", [-1, 21])
    def test_level_out_of_range(self, level):
        with pytest.raises(CatalogError, match="outside"):
            parse_technology(
                {
                    "name": "X",
                    "branch": "science",
                    "required_level": level,
                    "cost": 10,
                    "description": "",
                }
            )

    def test_non_positive_cost(self):
        with pytest.raises(CatalogError, match="non-positive cost"):
            parse_technology(
                {
                    "name": "X",
                    "branch": "science",
                    "required_level": 1,
                    "cost": 0,
                    "description": "",
                }
            )

    def test_missing_fields(self):
        with pytest.raises(CatalogError, match="cost"):
            parse_technology(
                {
                    "name": "X",
                    "branch": "science",
                    "required_level": 1,
                    "description": "",
                }
            )

    def test_duplicate_names(self, tmp_path):
        entry = {
            "name": "Writing",
            "branch": "science",
            "required_level": 1,
            "cost": 50,
            "description": "",
        }
        path = write_catalog(tmp_path / "techs.json", [entry, entry])

        with pytest.raises(CatalogError, match="Duplicate technology names: Writing"):
            load_technologies(path)


class TestEventPool:
    def test_bundled_pool(self):
        pool = load_event_pool()

        assert len(pool) == 17
        assert pool[0].event.name == "Earthquake"

    def test_every_era_has_events(self):
        pool = load_event_pool()
        for era in Era:
            assert any(definition.covers(era) for definition in pool)

    def test_defaults(self):
        definition = parse_event_definition(
            {"name": "Fog", "description": "Thick fog.", "type": "golden_age"}
        )

        assert definition.min_era == Era.STONE_AGE
        assert definition.max_era == Era.SPACE
        assert definition.late_description is None
        assert definition.event.happiness_effect == 0.0
        assert definition.event.population_multiplier == 1.0

    def test_effect_types(self):
        definition = parse_event_definition(
            {
                "name": "Boom",
                "description": "",
                "type": "tech_breakthrough",
                "effects": {"tech_boost": 3.0, "economy_effect": 40},
            }
        )

        assert definition.event.event_type == EventType.TECH_BREAKTHROUGH
        assert definition.event.tech_boost == 3
        assert isinstance(definition.event.tech_boost, int)
        assert isinstance(definition.event.economy_effect, float)

    def test_unknown_effect(self):
        with pytest.raises(CatalogError, match="Unknown effect 'luck_effect'"):
            parse_event_definition(
                {
                    "name": "X",
                    "description": "",
                    "type": "war",
                    "effects": {"luck_effect": 1.0},
                }
            )

    def test_unknown_type(self):
        with pytest.raises(CatalogError, match="Unknown event type 'party'"):
            parse_event_definition({"name": "X", "description": "", "type": "party"})

    def test_unknown_era(self):
        with pytest.raises(CatalogError, match="Unknown era 'future'"):
            parse_event_definition(
                {"name": "X", "description": "", "type": "war", "min_era": "future"}
            )

    def test_empty_era_window(self):
        with pytest.raises(CatalogError, match="empty era window"):
            parse_event_definition(
                {
                    "name": "X",
                    "description": "",
                    "type": "war",
                    "min_era": "space",
                    "max_era": "stone_age",
                }
            )

    def test_missing_fields(self):
        with pytest.raises(CatalogError, match="description, type"):
            parse_event_definition({"name": "X"})

    def test_custom_file(self, tmp_path):
        path = write_catalog(
            tmp_path / "events.json",
            [{"name": "Fog", "description": "Thick fog.", "type": "golden_age"}],
        )
        assert [d.event.name for d in load_event_pool(path)] == ["Fog"]


class TestReadCatalog:
    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="Cannot read catalog"):
            read_catalog(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(CatalogError, match="Cannot read catalog"):
            read_catalog(path)

    def test_not_a_list(self, tmp_path):
        path = write_catalog(tmp_path / "obj.json", {"name": "Writing"})
        with pytest.raises(CatalogError, match="list of entries"):
            read_catalog(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_bytes(b'[{"name": "\xff"}]')
        with pytest.raises(CatalogError, match="Cannot read catalog"):
            read_catalog(path)
