"""
tests/test_reader.py

Unit tests for HubInputReader.
"""
import os
import numpy as np
import pandas as pd
import pytest

from energyhub.exceptions import ProfileError, ParameterNotFoundError
from energyhub.input.reader import HubInputReader
from energyhub.interfaces.technologies import Technology, Component


def test_read_assumptions(tmp_path, assumptions):
    assumptions.to_csv(tmp_path / "assumptions.csv", index=False)
    reader = HubInputReader(str(tmp_path))
    params = reader.read_assumptions("assumptions.csv", year=2030)
    assert params.year == 2030
    assert params.lookup(Technology.BATTERY, Component.EP_RATIO) == pytest.approx(6.0)


def test_read_assumptions_missing_year(tmp_path, assumptions):
    assumptions.to_csv(tmp_path / "assumptions.csv", index=False)
    with pytest.raises(ParameterNotFoundError):
        HubInputReader(str(tmp_path)).read_assumptions("assumptions.csv", year=2040)


def test_read_assumptions_from_workbook_sheet(tmp_path, assumptions):
    with pd.ExcelWriter(tmp_path / "assumptions.xlsx") as writer:
        assumptions.head(1).to_excel(writer, sheet_name="Notes", index=False)
        assumptions.to_excel(writer, sheet_name="Main", index=False)
    reader = HubInputReader(str(tmp_path))
    params = reader.read_assumptions("assumptions.xlsx", year=2050, sheet="Main")
    assert params.lookup(Technology.BATTERY, Component.EP_RATIO) == pytest.approx(4.0)
    assert params.lookup(Technology.THERMAL_STORAGE, Component.EP_RATIO) == pytest.approx(24.0)


def test_read_assumptions_workbook_defaults_to_first_sheet(tmp_path, assumptions):
    assumptions.to_excel(tmp_path / "assumptions.xlsx", sheet_name="Main", index=False)
    params = HubInputReader(str(tmp_path)).read_assumptions("assumptions.xlsx", year=2030)
    assert params.lookup(Technology.BATTERY, Component.EP_RATIO) == pytest.approx(6.0)


def test_read_profiles_orders_by_hour(tmp_path):
    df = pd.DataFrame({
        "Hour": [3, 1, 2],
        "PVO": [0.3, 0.1, 0.2],
        "pva": [0.0, 0.0, 0.0],
        "Wind": [0.5, 0.5, 0.5],
        "wave": [0.4, 0.4, 0.4],
        "comment": ["c", "a", "b"],
    })
    df.to_csv(tmp_path / "profiles.csv", index=False)
    profiles = HubInputReader(str(tmp_path)).read_profiles("profiles.csv")
    assert list(profiles.data.columns) == ["pvo", "pva", "wind", "wave"]
    np.testing.assert_allclose(profiles.get("pvo"), [0.1, 0.2, 0.3])


def test_read_profiles_missing_column(tmp_path):
    pd.DataFrame({"pvo": [0.1], "pva": [0.1], "wind": [0.1]}).to_csv(
        tmp_path / "profiles.csv", index=False)
    with pytest.raises(ProfileError, match="wave"):
        HubInputReader(str(tmp_path)).read_profiles("profiles.csv")


def test_read_config(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("key: value\n")
    reader = HubInputReader(str(tmp_path))
    assert reader.read_config("config.yaml")["key"] == "value"


def test_read_empty_config(tmp_path):
    (tmp_path / "empty.yaml").write_text("")
    assert HubInputReader(str(tmp_path)).read_config("empty.yaml") == {}


def test_from_config(tmp_path, run_files):
    path = run_files(barren=True)
    config = HubInputReader.from_config(str(path))
    assert config.year == 2050
    assert config.settings.hours == 24
    assert config.n_scenarios == 3
    assert config.output_dir is None
    assert config.assumptions_path == os.path.normpath(str(tmp_path / "assumptions.csv"))

    coast = config.locations[0]
    assert coast.name == "coast"
    assert coast.profiles_path == os.path.normpath(str(tmp_path / "profiles.csv"))
    assert coast.demand.ammonia == 240.0
    assert coast.overrides == {(Technology.WAVE, Component.CAPEX): 1800.0}
    assert coast.scenarios["Wave"].land_area == 0.0
    assert coast.scenarios["Wave-PV-Wind"].land_area == 1000.0
    assert coast.scenarios["Wave-PV-Wind"].wave_potential == 1e5
    assert config.locations[1].scenarios["Wave"].wave_potential == 0.0


class TestParseConfig:
    """Tests for rejected run configurations."""

    @pytest.fixture
    def raw(self):
        return {
            "assumptions": "assumptions.csv",
            "locations": {
                "coast": {"profiles": "p.csv", "scenarios": {"Wave": {"land_area": 0}}},
            },
        }

    def test_minimal(self, raw, tmp_path):
        config = HubInputReader(str(tmp_path)).parse_config(raw)
        assert config.settings.hours == 8760
        assert config.solver == {}
        assert config.assumptions_sheet is None

    def test_assumptions_sheet(self, raw):
        raw["assumptions"] = "assumptions.xlsx"
        raw["assumptions_sheet"] = "Main"
        assert HubInputReader().parse_config(raw).assumptions_sheet == "Main"

    def test_missing_assumptions(self, raw):
        del raw["assumptions"]
        with pytest.raises(ValueError, match="assumptions"):
            HubInputReader().parse_config(raw)

    def test_no_locations(self, raw):
        raw["locations"] = {}
        with pytest.raises(ValueError, match="location"):
            HubInputReader().parse_config(raw)

    def test_location_without_scenarios(self, raw):
        raw["locations"]["coast"]["scenarios"] = {}
        with pytest.raises(ValueError, match="no scenarios"):
            HubInputReader().parse_config(raw)

    def test_unknown_setting(self, raw):
        raw["settings"] = {"horizon": 24}
        with pytest.raises(ValueError, match="Unknown settings"):
            HubInputReader().parse_config(raw)

    def test_unknown_override_technology(self, raw):
        raw["locations"]["coast"]["overrides"] = [
            {"technology": "Tidal", "component": "CAPEX", "value": 1.0}
        ]
        with pytest.raises(ValueError, match="Tidal"):
            HubInputReader().parse_config(raw)

    def test_override_by_member_name(self, raw):
        raw["locations"]["coast"]["overrides"] = [
            {"technology": "wave", "component": "opex", "value": 40}
        ]
        config = HubInputReader().parse_config(raw)
        assert config.locations[0].overrides == {(Technology.WAVE, Component.OPEX): 40.0}
