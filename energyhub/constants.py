# energyhub/constants.py

"""
Constants shared by the model builder, the result compiler and the runners.

This module defines the default horizon, tolerances, siting densities and
the engineering limits of the conversion technologies.
"""

# Tolerance for floating point comparisons on solved values
TOL = 1e-6

# Hours per (non-leap) representative year
HOURS_PER_YEAR = 8760

# Default horizon year of the assumptions table
DEFAULT_YEAR = 2050

# Discount rate of the capital recovery factor
DISCOUNT_RATE = 0.07

# Share of the available land usable by onshore renewables
LAND_USE_FRACTION = 0.1

# Installable power per km² of used land [MW/km²]
PV_POWER_DENSITY = 150.0
WIND_POWER_DENSITY = 8.4

# Minimum load as a fraction of installed capacity
ELECTROLYSER_MIN_LOAD = 0.2
SYNTHESIS_MIN_LOAD = 0.5

# Heat pump running on electrolyser waste heat [°C]
WASTE_HEAT_SINK_TEMPERATURE = 100.0
WASTE_HEAT_SOURCE_TEMPERATURE = 75.0

# Assumption tables are in kEUR; reports are in EUR and MEUR
COST_UNIT_TO_EUR = 1e3
COST_UNIT_TO_MEUR = 1e-3

# Profile names, in the order of the renewable technologies
PROFILE_NAMES = ('pvo', 'pva', 'wind', 'wave')


def capital_recovery_factor(rate: float, lifetime: float) -> float:
    if rate == 0:
        return 1.0 / lifetime
    return rate / (1 - (1 + rate) ** -lifetime)


def waste_heat_pump_cop(sink_temperature: float = WASTE_HEAT_SINK_TEMPERATURE,
                        source_temperature: float = WASTE_HEAT_SOURCE_TEMPERATURE) -> float:
    """Empirical COP of a heat pump lifting electrolyser waste heat."""
    lift = sink_temperature - source_temperature
    return 9.99 - 0.2049 * lift + 0.001249 * lift ** 2
