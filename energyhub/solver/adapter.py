# energyhub/solver/adapter.py

"""
Solver adapter: hands an assembled LP to ``scipy.optimize.linprog``.

The adapter is the only place that knows about the backend. It reads the
matrix form of a ``linopy.Model`` (``Model.matrices``), splits its rows into
the inequality and equality blocks ``linprog`` takes (objective vector,
sparse inequality and equality matrices, variable bounds) and returns the
optimal point, or raises one of the ``SolverError`` subclasses. A combined "infeasible or unbounded" verdict from presolve is re-solved once with
presolve disabled.

Example
-------
>>> solver = LinprogSolver(method='highs-ipm', options={'time_limit': 3600})
>>> solution = solver.solve_model(model.program)
>>> solution.objective
1834215.7
"""

import logging
import time
import linopy
import numpy as np
import scipy.sparse as sp
from dataclasses import dataclass
from typing import Any, Dict, Optional

from scipy.optimize import linprog

from ..exceptions import (
    SolverError,
    InfeasibleModelError,
    UnboundedModelError,
    SolverNumericalError,
)
from ..interfaces.results import HubSolution

logger = logging.getLogger(__name__)

METHODS = ('highs', 'highs-ds', 'highs-ipm')

# scipy.optimize.linprog status codes
STATUS_OPTIMAL = 0
STATUS_LIMIT = 1
STATUS_INFEASIBLE = 2
STATUS_UNBOUNDED = 3
STATUS_NUMERICAL = 4


@dataclass(frozen=True)
class SolverResult:
    """
    Raw optimal point returned by the backend.

    Attributes
    ----------
    x : np.ndarray
        Solution vector.
    objective : float
        Objective value at ``x``.
    status : int
        Backend status code (always 0 for a returned result).
    message : str
        Backend message.
    runtime : float
        Wall-clock time of the solve (seconds).
    """
    x: np.ndarray
    objective: float
    status: int
    message: str
    runtime: float


@dataclass(frozen=True)
class ModelMatrices:
    """
    A linopy model in the row-split form taken by ``linprog``.

    ``>=`` rows are negated into ``A_ub``; empty blocks are ``None``.
    ``positions`` maps each variable name to its columns of ``x``.
    """
    c: np.ndarray
    A_ub: Optional[sp.csr_matrix]
    b_ub: Optional[np.ndarray]
    A_eq: Optional[sp.csr_matrix]
    b_eq: Optional[np.ndarray]
    bounds: np.ndarray
    positions: Dict[str, np.ndarray]

    def split(self, x: np.ndarray) -> Dict[str, Any]:
        """{variable name: float or hourly array} of a solution vector."""
        values = {}
        for name, cols in self.positions.items():
            values[name] = float(x[cols]) if cols.ndim == 0 else x[cols]
        return values


def model_matrices(model: linopy.Model) -> ModelMatrices:
    """
    Extract the matrix form of an assembled ``linopy.Model``.

    Raises
    ------
    SolverError
        If the model has no linear rows at all.
    """
    m = model.matrices
    if m.A is None:
        raise SolverError("Model has no constraints")
    A = sp.csr_matrix(m.A)
    sense = np.asarray(m.sense).astype(str)
    le = np.flatnonzero(np.char.startswith(sense, '<'))
    ge = np.flatnonzero(np.char.startswith(sense, '>'))
    eq = np.flatnonzero(np.char.startswith(sense, '='))

    A_ub = sp.vstack([A[le], -A[ge]], format='csr') if len(le) + len(ge) else None
    b_ub = np.concatenate([m.b[le], -m.b[ge]]) if A_ub is not None else None
    A_eq = A[eq] if len(eq) else None
    b_eq = m.b[eq] if len(eq) else None

    vlabels = np.asarray(m.vlabels)
    label_to_pos = np.full(int(vlabels.max()) + 1, -1)
    label_to_pos[vlabels] = np.arange(len(vlabels))
    positions = {name: label_to_pos[var.labels.values] for name, var in model.variables.items()}

    logger.debug(f"Matrix form: {A.shape[0]} rows ({len(eq)} equalities), {A.shape[1]} columns")
    return ModelMatrices(
        c=np.asarray(m.c, dtype=float),
        A_ub=A_ub, b_ub=b_ub,
        A_eq=A_eq, b_eq=b_eq,
        bounds=np.column_stack([m.lb, m.ub]),
        positions=positions,
    )


def _is_undecided(status: int, message: str) -> bool:
    # HiGHS may stop presolve with a combined verdict
    text = message.lower()
    return status != STATUS_OPTIMAL and (
        'infeasible or unbounded' in text or 'unbounded or infeasible' in text
    )


class LinprogSolver:
    """
    LP solver backed by the HiGHS methods of ``scipy.optimize.linprog``.

    Parameters
    ----------
    method : str
        One of ``'highs'`` (automatic choice), ``'highs-ds'`` (dual simplex)
        or ``'highs-ipm'`` (interior point).
    options : dict, optional
        Passed through to ``linprog`` (e.g. ``presolve``, ``time_limit``,
        ``primal_feasibility_tolerance``).
    """

    def __init__(self, method: str = 'highs', options: Optional[Dict[str, Any]] = None):
        if method not in METHODS:
            raise ValueError(f"Unknown LP method '{method}', expected one of {METHODS}")
        self.method = method
        self.options = dict(options or {})

    def __repr__(self):
        return f"LinprogSolver(method={self.method!r}, options={self.options!r})"

    def _call(self, c, A_ub, b_ub, A_eq, b_eq, bounds, options):
        return linprog(
            c,
            A_ub=A_ub, b_ub=b_ub,
            A_eq=A_eq, b_eq=b_eq,
            bounds=bounds,
            method=self.method,
            options=options,
        )

    def solve(self, c, A_ub=None, b_ub=None, A_eq=None, b_eq=None, bounds=None) -> SolverResult:
        """
        Solve ``min c @ x`` subject to the given rows and bounds.

        Returns
        -------
        SolverResult
            The optimal point.

        Raises
        ------
        InfeasibleModelError
            If the backend proves that no feasible point exists.
        UnboundedModelError
            If the objective decreases without limit.
        SolverNumericalError
            On iteration/time limits or numerical failure, carrying the
            backend status and message.
        """
        n = len(c)
        logger.info(f"Solving LP with {n} variables using '{self.method}'")

        start = time.perf_counter()
        res = self._call(c, A_ub, b_ub, A_eq, b_eq, bounds, self.options)
        if _is_undecided(res.status, res.message):
            logger.info("Presolve could not decide between infeasible and unbounded; "
                        "re-solving with presolve disabled")
            res = self._call(c, A_ub, b_ub, A_eq, b_eq, bounds,
                             {**self.options, 'presolve': False})
        runtime = time.perf_counter() - start

        if res.status == STATUS_OPTIMAL:
            logger.info(f"LP solved in {runtime:.2f}s, objective={res.fun:.6g}")
            return SolverResult(np.asarray(res.x, dtype=float), float(res.fun),
                                int(res.status), res.message, runtime)

        logger.error(f"LP solve failed after {runtime:.2f}s (status {res.status}): {res.message}")
        if res.status == STATUS_INFEASIBLE:
            raise InfeasibleModelError(res.message, status=res.status)
        if res.status == STATUS_UNBOUNDED:
            raise UnboundedModelError(res.message, status=res.status)
        if res.status in (STATUS_LIMIT, STATUS_NUMERICAL):
            raise SolverNumericalError(res.message, status=res.status)
        raise SolverError(f"Unexpected solver status {res.status}: {res.message}",
                          status=res.status)

    def solve_model(self, model: linopy.Model) -> HubSolution:
        """Solve an assembled ``linopy.Model`` and split the solution by variable."""
        m = model_matrices(model)
        result = self.solve(m.c, m.A_ub, m.b_ub, m.A_eq, m.b_eq, m.bounds)
        return HubSolution(
            x=result.x,
            values=m.split(result.x),
            objective=result.objective,
            message=result.message,
            runtime=result.runtime,
        )

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> 'LinprogSolver':
        """Build from the ``solver`` mapping of a run configuration."""
        config = dict(config or {})
        return cls(method=config.get('method', 'highs'), options=config.get('options'))
