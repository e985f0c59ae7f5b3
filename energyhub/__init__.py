# energyhub/__init__.py

"""
Energy hub capacity-expansion and dispatch optimisation.

Determines the cost-optimal design and hourly operation of a site that
turns renewable electricity into hydrogen, synthetic methane, ammonia,
methanol and Fischer-Tropsch liquids.

Main Components
---------------
ParameterTable : class
    Technology assumptions for one horizon year.
HubInputs : dataclass
    Profiles, demands, siting and settings of one run.
EnergyHubModelBuilder : class
    Assembles the LP.
LinprogSolver : class
    Solves it with HiGHS through scipy.
ResultCompiler : class
    Derives the report, dispatch and capacity tables.
run_hub, run_from_config : function
    Single-run and batch entry points.

Example
-------
>>> from energyhub import run_from_config
>>> results = run_from_config('config/config.yaml')
>>> results[0].report.to_frame()
"""

from .interfaces import (
    Technology,
    Component,
    Carrier,
    ParameterTable,
    HubSettings,
    FuelDemand,
    SiteConditions,
    HourlyProfiles,
    HubInputs,
    HubSolution,
    HubReport,
    ReportRow,
)
from .model import EnergyHubModelBuilder, HubModel
from .solver import LinprogSolver, SolverResult
from .output import ResultCompiler, OutputWriter
from .run import run_hub, run_location, run_from_config, HubRunResult

__all__ = [
    # Inputs
    'Technology',
    'Component',
    'Carrier',
    'ParameterTable',
    'HubSettings',
    'FuelDemand',
    'SiteConditions',
    'HourlyProfiles',
    'HubInputs',
    # Pipeline
    'EnergyHubModelBuilder',
    'HubModel',
    'LinprogSolver',
    'SolverResult',
    'ResultCompiler',
    'OutputWriter',
    # Results
    'HubSolution',
    'HubReport',
    'ReportRow',
    'HubRunResult',
    # Run functions
    'run_hub',
    'run_location',
    'run_from_config',
]

__version__ = '0.1.0'
