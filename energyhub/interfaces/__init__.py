# energyhub/interfaces/__init__.py

"""
Typed inputs and results of the energy hub model.
"""

from .technologies import Technology, Component, Carrier
from .parameters import ParameterTable
from .containers import (
    HubSettings,
    FuelDemand,
    SiteConditions,
    HourlyProfiles,
    HubInputs,
)
from .results import HubSolution, HubReport, ReportRow

__all__ = [
    'Technology',
    'Component',
    'Carrier',
    'ParameterTable',
    'HubSettings',
    'FuelDemand',
    'SiteConditions',
    'HourlyProfiles',
    'HubInputs',
    'HubSolution',
    'HubReport',
    'ReportRow',
]
