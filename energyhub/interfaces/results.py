# energyhub/interfaces/results.py

"""
Result containers of an energy hub optimisation.

    HubSolution  (raw solved variables, objective, solver status)
    ReportRow    (one labelled quantity of the report)
    HubReport    (ordered report rows grouped into sections)

The report is the only structure handed to exporters; it does not assume
any file format.
"""

import numpy as np
import pandas as pd
from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Union

REPORT_SECTIONS: Tuple[str, ...] = (
    'System Cost',
    'Capacity',
    'Output',
    'Electricity in',
    'Gas in',
    'Hydrogen in',
    'CO2 in',
    'Annual Inv',
    'Opex',
    'Ramping',
)

REPORT_COLUMNS = ['SECTION', 'LABEL', 'UNIT', 'VALUE']


# ------------------------------------------------------------------
# HubSolution
# ------------------------------------------------------------------

@dataclass(frozen=True)
class HubSolution:
    """
    Optimal point of the energy hub LP.

    Attributes
    ----------
    x : np.ndarray
        Full solution vector.
    values : dict
        {variable name: float or hourly array}, split from ``x``.
    objective : float
        Optimal annualized system cost, in the cost unit of the
        assumptions table (kEUR for the shipped tables).
    status : str
        ``'optimal'``; failures are raised, never stored here.
    message : str
        Solver message.
    runtime : float
        Wall-clock solve time (seconds).
    """
    x: np.ndarray
    values: Dict[str, Union[float, np.ndarray]]
    objective: float
    status: str = 'optimal'
    message: str = ''
    runtime: float = 0.0

    def __getitem__(self, name: str) -> Union[float, np.ndarray]:
        return self.values[name]


# ------------------------------------------------------------------
# HubReport
# ------------------------------------------------------------------

@dataclass(frozen=True)
class ReportRow:
    """One (label, unit, value) entry of a report section."""
    section: str
    label: str
    unit: str
    value: float


@dataclass(frozen=True)
class HubReport:
    """
    Ordered report of one solved energy hub.

    Attributes
    ----------
    rows : list of ReportRow
        Rows in section order (see ``REPORT_SECTIONS``), preserving the
        order of technologies within each section.

    Examples
    --------
    >>> report.value('System Cost', 'System Cost')
    1834.2
    >>> report.section('Capacity')
    [ReportRow(section='Capacity', label='PV fixed-tilt', ...), ...]
    """
    rows: List[ReportRow] = field(default_factory=list)

    def validate(self) -> None:
        """
        Check section names and ordering.

        Raises
        ------
        ValueError
            If a row has an unknown section, sections are out of order,
            or a value is not finite.
        """
        last = -1
        for row in self.rows:
            if row.section not in REPORT_SECTIONS:
                raise ValueError(f"Unknown report section '{row.section}'")
            position = REPORT_SECTIONS.index(row.section)
            if position < last:
                raise ValueError(f"Report section '{row.section}' is out of order")
            last = position
            if not np.isfinite(row.value):
                raise ValueError(f"Report value '{row.label}' is not finite: {row.value}")

    def section(self, name: str) -> List[ReportRow]:
        return [row for row in self.rows if row.section == name]

    def value(self, section: str, label: str) -> float:
        """Value of a single row; raises ``KeyError`` if absent."""
        for row in self.rows:
            if row.section == section and row.label == label:
                return row.value
        raise KeyError(f"No report row '{label}' in section '{section}'")

    @property
    def system_cost(self) -> float:
        return self.value('System Cost', 'System Cost')

    def to_frame(self) -> pd.DataFrame:
        """Report as a DataFrame with columns ``SECTION, LABEL, UNIT, VALUE``."""
        return pd.DataFrame(
            [(r.section, r.label, r.unit, r.value) for r in self.rows],
            columns=REPORT_COLUMNS,
        )
