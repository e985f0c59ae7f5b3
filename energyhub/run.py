# energyhub/run.py

"""
Run interface of the energy hub model.

This module ties the pipeline together: build the LP from the inputs, solve
it, compile the report. ``run_hub`` runs one hub and raises on failure;
``run_location`` and ``run_from_config`` run batches of independent
scenarios and record failed scenarios instead of aborting the batch.

Example
-------
>>> from energyhub import run_from_config
>>> results = run_from_config('config/config.yaml', processes=4)
>>> for r in results:
...     print(r.location, r.scenario, r.status, r.objective)
"""

import logging
import multiprocessing as mp
import os
import pandas as pd
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import EnergyHubError, SolverError
from .input.reader import HubInputReader
from .input.structures import LocationConfig, RunConfig
from .interfaces.containers import HubInputs, HubSettings, HourlyProfiles
from .interfaces.parameters import ParameterTable
from .interfaces.results import HubReport
from .logs.logger import get_logger, close_logger
from .model.builder import EnergyHubModelBuilder
from .output.compiler import ResultCompiler
from .output.writer import OutputWriter
from .solver.adapter import LinprogSolver

logger = logging.getLogger(__name__)


@dataclass
class HubRunResult:
    """
    Container for the outcome of one hub run.

    Attributes
    ----------
    location, scenario : str
        Identify the run within a batch.
    status : str
        ``'optimal'``, or ``'infeasible'``, ``'unbounded'``, ``'numerical'``,
        ``'error'`` for a failed run.
    objective : float, optional
        Optimal annualized system cost; ``None`` for a failed run.
    report : HubReport, optional
        Compiled report; ``None`` for a failed run.
    dispatch : pd.DataFrame, optional
        Hourly schedule.
    capacity : pd.DataFrame, optional
        Installed capacities.
    violations : list of str
        Operating-limit checks that failed on the solved values.
    solve_time : float
        Time taken to solve (seconds).
    error : str, optional
        Failure message.
    """
    location: str = ''
    scenario: str = ''
    status: str = 'not_run'
    objective: Optional[float] = None
    report: Optional[HubReport] = None
    dispatch: Optional[pd.DataFrame] = None
    capacity: Optional[pd.DataFrame] = None
    violations: List[str] = field(default_factory=list)
    solve_time: float = 0.0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 'optimal'

    @property
    def name(self) -> str:
        return f"{self.location}_{self.scenario}"


def run_hub(
    inputs: HubInputs,
    params: ParameterTable,
    solver: Optional[LinprogSolver] = None,
    location: str = '',
    scenario: str = '',
) -> HubRunResult:
    """
    Build, solve and report one energy hub.

    Parameters
    ----------
    inputs : HubInputs
        Profiles, demands, siting and settings.
    params : ParameterTable
        Technology assumptions for ``inputs.settings.year``.
    solver : LinprogSolver, optional
        Solver to use (default: HiGHS with default options).

    Returns
    -------
    HubRunResult
        Result with status ``'optimal'``.

    Raises
    ------
    ParameterError, ProfileError
        If the inputs cannot be turned into a model.
    SolverError
        If the LP is infeasible, unbounded or fails numerically.
    """
    solver = solver or LinprogSolver()

    model = EnergyHubModelBuilder(inputs, params).build()
    solution = solver.solve_model(model.program)

    compiler = ResultCompiler(model, solution)
    result = HubRunResult(
        location=location,
        scenario=scenario,
        status=solution.status,
        objective=solution.objective,
        report=compiler.report(),
        dispatch=compiler.dispatch_frame(),
        capacity=compiler.capacity_frame(),
        violations=compiler.verify(),
        solve_time=solution.runtime,
    )
    logger.info(f"Hub run {result.name or 'unnamed'} completed: "
                f"objective={result.objective:.2f}, {len(result.violations)} violation(s)")
    return result


# ------------------------------------------------------------------
# Batch runs
# ------------------------------------------------------------------

Task = Tuple[str, str, HubInputs, ParameterTable, Dict[str, Any]]


def _run_task(task: Task) -> HubRunResult:
    """Run one scenario; failures are recorded in the result, not raised."""
    location, scenario, inputs, params, solver_config = task
    try:
        return run_hub(inputs, params, LinprogSolver.from_config(solver_config),
                       location=location, scenario=scenario)
    except SolverError as e:
        status, message = e.status_name, e.message
    except EnergyHubError as e:
        status, message = 'error', str(e)
    logger.error(f"Scenario {location}_{scenario} failed ({status}): {message}")
    return HubRunResult(location=location, scenario=scenario, status=status, error=message)


def _location_tasks(location: LocationConfig, params: ParameterTable,
                    settings: HubSettings, solver_config: Dict[str, Any],
                    profiles: HourlyProfiles) -> List[Task]:
    params = params.with_overrides(location.overrides) if location.overrides else params
    return [
        (location.name, scenario,
         HubInputs(profiles=profiles, demand=location.demand, site=site, settings=settings),
         params, solver_config)
        for scenario, site in location.scenarios.items()
    ]


def run_location(
    location: LocationConfig,
    params: ParameterTable,
    settings: Optional[HubSettings] = None,
    solver_config: Optional[Dict[str, Any]] = None,
    reader: Optional[HubInputReader] = None,
) -> List[HubRunResult]:
    """
    Run every scenario of one location, one after the other.

    Each scenario is an independent full re-solve; a failed scenario is
    recorded with its status and does not stop the others.
    """
    reader = reader or HubInputReader()
    settings = settings or HubSettings(year=params.year)
    profiles = reader.read_profiles(location.profiles_path)
    tasks = _location_tasks(location, params, settings, solver_config or {}, profiles)
    logger.info(f"Running {len(tasks)} scenario(s) for location '{location.name}'")
    return [_run_task(task) for task in tasks]


def run_from_config(
    path: str,
    processes: int = 1,
    output_dir: Optional[str] = None,
) -> List[HubRunResult]:
    """
    Run all locations and scenarios of a YAML run configuration.

    Parameters
    ----------
    path : str
        Path of the run configuration.
    processes : int
        Number of worker processes; scenarios share no state, so they can
        be solved in parallel.
    output_dir : str, optional
        Overrides the configuration's ``output_dir``. If neither is set,
        nothing is written.

    Returns
    -------
    list of HubRunResult
        One result per scenario, in configuration order.
    """
    config: RunConfig = HubInputReader.from_config(path)
    reader = HubInputReader(os.path.dirname(os.path.abspath(path)))
    params = reader.read_assumptions(config.assumptions_path, config.year,
                                     sheet=config.assumptions_sheet)

    tasks: List[Task] = []
    for location in config.locations:
        profiles = reader.read_profiles(location.profiles_path)
        tasks += _location_tasks(location, params, config.settings, config.solver, profiles)

    if processes > 1 and len(tasks) > 1:
        n_workers = min(processes, len(tasks))
        logger.info(f"Running {len(tasks)} scenarios on {n_workers} processes")
        with mp.Pool(n_workers) as pool:
            results = pool.map(_run_task, tasks)
    else:
        logger.info(f"Running {len(tasks)} scenarios sequentially")
        results = [_run_task(task) for task in tasks]

    output_dir = output_dir or config.output_dir
    if output_dir:
        _write_results(results, output_dir, run_name=os.path.splitext(os.path.basename(path))[0])

    failed = [r.name for r in results if not r.succeeded]
    if failed:
        logger.error(f"{len(failed)} of {len(results)} scenario(s) failed: {failed}")
    return results


def _write_results(results: List[HubRunResult], output_dir: str, run_name: str) -> None:
    writer = OutputWriter(output_dir)
    for result in results:
        run_log = get_logger(run_name, result.name, log_dir=os.path.join(output_dir, 'logs'))
        try:
            _write_result(writer, result, run_log)
        finally:
            close_logger(run_log)


def _write_result(writer: OutputWriter, result: HubRunResult, run_log: logging.Logger) -> None:
    if not result.succeeded:
        run_log.error(f"Status {result.status}: {result.error}")
        return
    writer.write_run(result.location, result.scenario, result.report.to_frame(),
                     result.dispatch, result.capacity)
    run_log.info(f"Status {result.status}, objective {result.objective:.6g}, "
                 f"solve time {result.solve_time:.2f}s")
    for violation in result.violations:
        run_log.warning(violation)
