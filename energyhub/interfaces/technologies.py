# energyhub/interfaces/technologies.py

"""
Typed names of the technologies, parameter components and energy carriers.

Enum values are the labels used in the ``Tech`` and ``Comp`` columns of the
technology assumptions table, so a member can be used directly as a lookup
key.
"""

from enum import Enum


class Technology(str, Enum):
    """Installable units of the energy hub, keyed by assumptions-table label."""

    # Renewable generation
    PV_FIXED = 'PV fixed-tilt'
    PV_TRACKING = 'PV single-axis tracking'
    ONSHORE_WIND = 'Onshore Wind'
    WAVE = 'Wave'

    # Conversion
    GAS_TURBINE = 'Multi-fuel Gas Turbine'
    HEAT_PUMP = 'Heat Pump'
    ELECTRIC_HEATER = 'Electric Heater'
    ELECTROLYSER = 'Alkaline Water Electrolyser (BCS)'
    DAC = 'Direct Air Capture'
    METHANATION = 'Methanation'
    AMMONIA_SYNTHESIS = 'Ammonia Synthesis'
    METHANOL_SYNTHESIS = 'Methanol Synthesis'
    FISCHER_TROPSCH = 'Fischer-Tropsch'

    # Storage
    BATTERY = 'Battery'
    BATTERY_INTERFACE = 'Battery Interface'
    THERMAL_STORAGE = 'Thermal Energy Storage'
    H2_ROCK_CAVERN = 'H2 Storage - lined rock cavern'
    H2_PIPE = 'H2 Storage - underground pipe'
    CO2_STORAGE = 'CO2 Storage'
    AMMONIA_STORAGE = 'Ammonia Storage'
    CH4_STORAGE = 'CH4 Storage'
    METHANOL_STORAGE = 'Methanol Storage'
    LIQUID_FUEL_STORAGE = 'Liquid Fuel Storage'

    def __str__(self):
        return self.value


class Component(str, Enum):
    """Parameter components of a technology row."""

    CAPEX = 'CAPEX'
    OPEX = 'OPEX'
    LIFETIME = 'Lifetime'
    EP_RATIO = 'E/P ratio'
    CHARGING_EFF = 'Charging eff'
    DISCHARGING_EFF = 'Discharging eff'
    ELECTRICITY_IN = 'Electricity in'
    HYDROGEN_IN = 'Hydrogen in'
    GAS_IN = 'Gas in'
    CO2_IN = 'CO2 in'
    HEAT_IN = 'Heat in'
    EXCESS_HEAT = 'Excess heat'
    WASTE_HEAT_RECOVERY = 'PtHeat eff.'
    RAMP_UP = 'Ramp up'
    COP = 'COP'

    def __str__(self):
        return self.value


class Carrier(str, Enum):
    """Energy and mass carriers balanced every hour."""

    ELECTRICITY = 'electricity'
    HEAT = 'heat'
    HYDROGEN = 'hydrogen'
    CO2 = 'co2'
    METHANE = 'methane'
    AMMONIA = 'ammonia'
    METHANOL = 'methanol'
    FT_LIQUID = 'ft_liquid'

    def __str__(self):
        return self.value


def parse_technology(name: str) -> Technology:
    """
    Resolve a technology from its table label or its enum member name.

    Raises
    ------
    ValueError
        If the name matches neither.
    """
    try:
        return Technology(name)
    except ValueError:
        pass
    try:
        return Technology[name.upper()]
    except KeyError:
        raise ValueError(f"Unknown technology '{name}'") from None


def parse_component(name: str) -> Component:
    """
    Resolve a component from its table label or its enum member name.

    Raises
    ------
    ValueError
        If the name matches neither.
    """
    try:
        return Component(name)
    except ValueError:
        pass
    try:
        return Component[name.upper()]
    except KeyError:
        raise ValueError(f"Unknown component '{name}'") from None
