# tests/conftest.py

import numpy as np
import pandas as pd
import pytest
import yaml

from energyhub.interfaces.technologies import Technology as T, Component as C
from energyhub.interfaces.parameters import ParameterTable
from energyhub.interfaces.containers import (
    HubSettings,
    FuelDemand,
    SiteConditions,
    HourlyProfiles,
    HubInputs,
)
from energyhub.model.builder import EnergyHubModelBuilder
from energyhub.solver.adapter import LinprogSolver

HOURS = 24
YEAR = 2050

# (CAPEX [kEUR/unit], OPEX [kEUR/unit/a], Lifetime [a])
COSTS = {
    T.PV_FIXED: (250, 5, 35),
    T.PV_TRACKING: (280, 5, 35),
    T.ONSHORE_WIND: (1000, 15, 25),
    T.WAVE: (2000, 48, 25),
    T.GAS_TURBINE: (500, 10, 30),
    T.BATTERY: (75, 1, 20),
    T.BATTERY_INTERFACE: (50, 1, 20),
    T.HEAT_PUMP: (500, 10, 20),
    T.ELECTRIC_HEATER: (50, 1, 20),
    T.THERMAL_STORAGE: (30, 0.5, 25),
    T.ELECTROLYSER: (250, 5, 30),
    T.H2_ROCK_CAVERN: (0.3, 0.01, 50),
    T.H2_PIPE: (0.5, 0.01, 50),
    T.DAC: (400, 16, 20),
    T.CO2_STORAGE: (0.1, 0.002, 30),
    T.METHANATION: (300, 10, 30),
    T.CH4_STORAGE: (0.05, 0.001, 50),
    T.AMMONIA_SYNTHESIS: (700, 20, 30),
    T.AMMONIA_STORAGE: (0.2, 0.004, 30),
    T.METHANOL_SYNTHESIS: (500, 15, 30),
    T.METHANOL_STORAGE: (0.1, 0.002, 30),
    T.FISCHER_TROPSCH: (700, 21, 30),
    T.LIQUID_FUEL_STORAGE: (0.05, 0.001, 30),
}

TECHNICAL = {
    (T.BATTERY, C.EP_RATIO): 4,
    (T.BATTERY, C.CHARGING_EFF): 0.95,
    (T.BATTERY, C.DISCHARGING_EFF): 0.95,
    (T.THERMAL_STORAGE, C.EP_RATIO): 24,
    (T.H2_ROCK_CAVERN, C.EP_RATIO): 100,
    (T.H2_PIPE, C.EP_RATIO): 50,
    (T.CO2_STORAGE, C.EP_RATIO): 24,
    (T.CH4_STORAGE, C.EP_RATIO): 100,
    (T.AMMONIA_STORAGE, C.EP_RATIO): 100,
    (T.METHANOL_STORAGE, C.EP_RATIO): 100,
    (T.LIQUID_FUEL_STORAGE, C.EP_RATIO): 100,
    (T.ELECTRIC_HEATER, C.ELECTRICITY_IN): 1.01,
    (T.ELECTROLYSER, C.ELECTRICITY_IN): 1.35,
    (T.ELECTROLYSER, C.WASTE_HEAT_RECOVERY): 0.15,
    (T.DAC, C.ELECTRICITY_IN): 0.25,
    (T.DAC, C.HEAT_IN): 1.5,
    (T.METHANATION, C.HYDROGEN_IN): 1.2,
    (T.METHANATION, C.CO2_IN): 0.2,
    (T.AMMONIA_SYNTHESIS, C.ELECTRICITY_IN): 0.1,
    (T.AMMONIA_SYNTHESIS, C.HYDROGEN_IN): 1.15,
    (T.AMMONIA_SYNTHESIS, C.EXCESS_HEAT): 0.2,
    (T.AMMONIA_SYNTHESIS, C.RAMP_UP): 0.01,
    (T.METHANOL_SYNTHESIS, C.ELECTRICITY_IN): 0.05,
    (T.METHANOL_SYNTHESIS, C.HYDROGEN_IN): 1.2,
    (T.METHANOL_SYNTHESIS, C.CO2_IN): 0.25,
    (T.METHANOL_SYNTHESIS, C.RAMP_UP): 0.01,
    (T.FISCHER_TROPSCH, C.ELECTRICITY_IN): 0.1,
    (T.FISCHER_TROPSCH, C.HYDROGEN_IN): 1.4,
    (T.FISCHER_TROPSCH, C.CO2_IN): 0.3,
    (T.FISCHER_TROPSCH, C.EXCESS_HEAT): 0.3,
    (T.GAS_TURBINE, C.HYDROGEN_IN): 0.55,
    (T.GAS_TURBINE, C.GAS_IN): 0.55,
    (T.HEAT_PUMP, C.COP): 3.0,
}


def assumption_records():
    """{(technology, component): value} of a complete synthetic table."""
    records = dict(TECHNICAL)
    for tech, (capex, opex, lifetime) in COSTS.items():
        records[(tech, C.CAPEX)] = capex
        records[(tech, C.OPEX)] = opex
        records[(tech, C.LIFETIME)] = lifetime
    return records


def hourly_profiles(hours=HOURS):
    h = np.arange(hours)
    day = (h % 24).astype(float)
    pvo = np.clip(np.sin(np.pi * (day - 6) / 12), 0, None)
    return HourlyProfiles.from_arrays(
        pvo=pvo,
        pva=np.clip(1.2 * pvo, 0, 1),
        wind=0.35 + 0.25 * np.cos(2 * np.pi * day / 24),
        wave=0.45 + 0.10 * np.sin(2 * np.pi * day / 24),
    )


@pytest.fixture
def records():
    return assumption_records()


@pytest.fixture
def assumptions(records):
    """Assumptions table with a second (unused) horizon year column."""
    table = pd.DataFrame([
        {'Tech': tech.value, 'Comp': comp.value, '2030': value * 1.5, '2050': value}
        for (tech, comp), value in records.items()
    ])
    return table


@pytest.fixture
def params(assumptions):
    return ParameterTable(assumptions, YEAR)


@pytest.fixture
def settings():
    return HubSettings(hours=HOURS)


@pytest.fixture
def profiles():
    return hourly_profiles()


@pytest.fixture
def demand():
    # 10 MWh of every fuel per hour over the 24-hour horizon
    return FuelDemand(ammonia=240.0, methane=240.0, methanol=240.0, ft_liquid=240.0)


@pytest.fixture
def site():
    return SiteConditions(land_area=1000.0, wave_potential=1e5)


@pytest.fixture
def inputs(profiles, demand, site, settings):
    return HubInputs(profiles=profiles, demand=demand, site=site, settings=settings)


@pytest.fixture
def model(inputs, params):
    return EnergyHubModelBuilder(inputs, params).build()


@pytest.fixture(scope="session")
def solved_hub():
    """Model and optimal solution of the reference 24-hour hub, solved once."""
    inputs = HubInputs(
        profiles=hourly_profiles(),
        demand=FuelDemand(ammonia=240.0, methane=240.0, methanol=240.0, ft_liquid=240.0),
        site=SiteConditions(land_area=1000.0, wave_potential=1e5),
        settings=HubSettings(hours=HOURS),
    )
    params = ParameterTable.from_records(assumption_records(), YEAR)
    model = EnergyHubModelBuilder(inputs, params).build()
    solution = LinprogSolver().solve_model(model.program)
    return model, solution


def write_run_files(directory, hours=HOURS, barren=False):
    """
    Write assumptions, profiles and a run configuration into ``directory``.

    With ``barren`` a second location without any land or wave resource is
    added; its single scenario cannot be served.
    """
    records = assumption_records()
    pd.DataFrame([
        {'Tech': tech.value, 'Comp': comp.value, '2050': value}
        for (tech, comp), value in records.items()
    ]).to_csv(directory / 'assumptions.csv', index=False)

    profiles = hourly_profiles(hours).data.copy()
    profiles.insert(0, 'hour', np.arange(1, hours + 1))
    profiles.to_csv(directory / 'profiles.csv', index=False)

    demand = {'ammonia': 240.0, 'methane': 240.0, 'methanol': 240.0, 'ft_liquid': 240.0}
    locations = {
        'coast': {
            'profiles': 'profiles.csv',
            'demand': demand,
            'wave_potential': 1e5,
            'overrides': [{'technology': 'Wave', 'component': 'CAPEX', 'value': 1800.0}],
            'scenarios': {'Wave': {'land_area': 0}, 'Wave-PV-Wind': {'land_area': 1000}},
        },
    }
    if barren:
        locations['barren'] = {
            'profiles': 'profiles.csv',
            'demand': demand,
            'scenarios': {'Wave': {'land_area': 0}},
        }
    config = {
        'year': YEAR,
        'assumptions': 'assumptions.csv',
        'settings': {'hours': hours},
        'locations': locations,
    }
    path = directory / 'config.yaml'
    path.write_text(yaml.safe_dump(config, sort_keys=False))
    return path


@pytest.fixture
def run_files(tmp_path):
    """Factory writing a complete run directory under ``tmp_path``."""
    def _write(barren=False):
        return write_run_files(tmp_path, barren=barren)
    return _write
