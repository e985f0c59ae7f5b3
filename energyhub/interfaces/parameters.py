# energyhub/interfaces/parameters.py

"""
Technology parameter resolution for the energy hub model.

This module defines the immutable ``ParameterTable`` that resolves scalar
technology parameters (efficiencies, conversion ratios, CAPEX, OPEX,
lifetime, E/P ratio, ramp cost) from a technology assumptions table for an
explicit horizon year.

The assumptions table is a DataFrame with columns:
- ``Tech``: technology label (see ``Technology``)
- ``Comp``: component label (see ``Component``)
- one numeric column per horizon year (``2050``, ``'2050'`` or ``'x2050'``)

Each (technology, component) key must resolve to exactly one value.
"""

import logging
import math
import pandas as pd
from dataclasses import dataclass, field
from typing import Dict, Iterable, Tuple, Union

from ..constants import DISCOUNT_RATE, capital_recovery_factor
from ..exceptions import (
    ParameterNotFoundError,
    AmbiguousParameterError,
    InvalidParameterError,
)
from .technologies import Technology, Component

logger = logging.getLogger(__name__)

TECH_COLUMN = 'Tech'
COMP_COLUMN = 'Comp'

ParameterKey = Tuple[Technology, Component]


def _year_column(table: pd.DataFrame, year: int):
    """Return the column label holding values for ``year``."""
    for candidate in (year, str(year), f"x{year}"):
        if candidate in table.columns:
            return candidate
    raise ParameterNotFoundError(
        f"Assumptions table has no column for horizon year {year} "
        f"(columns: {list(table.columns)})"
    )


@dataclass(frozen=True)
class ParameterTable:
    """
    Immutable technology assumptions for one horizon year.

    Attributes
    ----------
    table : pd.DataFrame
        Assumptions with ``Tech``, ``Comp`` and per-year value columns.
    year : int
        Horizon year selecting the value column.

    Examples
    --------
    >>> params = ParameterTable(assumptions, year=2050)
    >>> params.lookup(Technology.BATTERY, Component.EP_RATIO)
    4.0
    >>> params.annualized_capex(Technology.BATTERY)
    13.9...
    """
    table: pd.DataFrame
    year: int
    _values: Dict[ParameterKey, list] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        for col in (TECH_COLUMN, COMP_COLUMN):
            if col not in self.table.columns:
                raise ParameterNotFoundError(
                    f"Assumptions table must contain a '{col}' column"
                )
        value_col = _year_column(self.table, self.year)

        values: Dict[Tuple[str, str], list] = {}
        for tech, comp, value in zip(self.table[TECH_COLUMN],
                                     self.table[COMP_COLUMN],
                                     self.table[value_col]):
            key = (str(tech).strip(), str(comp).strip())
            values.setdefault(key, []).append(value)
        object.__setattr__(self, '_values', values)

    # =========================================================================
    # Lookup
    # =========================================================================

    def lookup(self, technology: Technology, component: Component) -> float:
        """
        Return the value of a (technology, component) key.

        Raises
        ------
        ParameterNotFoundError
            If no row matches, or the matching cell is empty.
        AmbiguousParameterError
            If more than one row matches.
        """
        matches = self._values.get((technology.value, component.value), [])
        if not matches:
            raise ParameterNotFoundError(
                f"No parameter '{component.value}' for technology "
                f"'{technology.value}' in year {self.year}"
            )
        if len(matches) > 1:
            raise AmbiguousParameterError(
                f"{len(matches)} rows match parameter '{component.value}' "
                f"for technology '{technology.value}' in year {self.year}"
            )
        value = matches[0]
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise ParameterNotFoundError(
                f"Parameter '{component.value}' for technology "
                f"'{technology.value}' is not numeric: {value!r}"
            ) from None
        if math.isnan(value):
            raise ParameterNotFoundError(
                f"Parameter '{component.value}' for technology "
                f"'{technology.value}' is empty for year {self.year}"
            )
        return value

    def annualized_capex(self, technology: Technology, rate: float = DISCOUNT_RATE) -> float:
        """
        Annualized CAPEX via the capital recovery factor.

        ``CAPEX * r / (1 - (1 + r) ** -Lifetime)``

        Raises
        ------
        InvalidParameterError
            If the lifetime is not strictly positive.
        """
        capex = self.lookup(technology, Component.CAPEX)
        lifetime = self.lookup(technology, Component.LIFETIME)
        if lifetime <= 0:
            raise InvalidParameterError(
                f"Lifetime of '{technology.value}' must be positive, got {lifetime}"
            )
        return capex * capital_recovery_factor(rate, lifetime)

    def opex(self, technology: Technology) -> float:
        return self.lookup(technology, Component.OPEX)

    # =========================================================================
    # Validation and derivation
    # =========================================================================

    def validate(self, required: Iterable[ParameterKey]) -> None:
        """
        Check that every required key resolves to exactly one value.

        All problems are collected and reported together.

        Raises
        ------
        ParameterNotFoundError
            If any key is missing or empty.
        AmbiguousParameterError
            If any key matches more than one row (and none is missing).
        """
        missing = []
        ambiguous = []
        for technology, component in sorted(set(required)):
            try:
                self.lookup(technology, component)
            except ParameterNotFoundError:
                missing.append(f"{technology.value}/{component.value}")
            except AmbiguousParameterError:
                ambiguous.append(f"{technology.value}/{component.value}")

        if missing:
            raise ParameterNotFoundError(
                f"Assumptions table lacks {len(missing)} parameter(s) for "
                f"year {self.year}: {', '.join(missing)}"
            )
        if ambiguous:
            raise AmbiguousParameterError(
                f"Assumptions table has duplicate rows for: {', '.join(ambiguous)}"
            )
        logger.debug(f"Validated {len(set(required))} technology parameters for {self.year}")

    def with_overrides(self, overrides: Dict[ParameterKey, float]) -> 'ParameterTable':
        """
        Return a new table with some values replaced.

        Keys absent from the table are appended as new rows.

        Parameters
        ----------
        overrides : dict
            {(technology, component): value} for the active year.
        """
        table = self.table.copy()
        value_col = _year_column(table, self.year)
        new_rows = []
        for (technology, component), value in overrides.items():
            mask = ((table[TECH_COLUMN].astype(str).str.strip() == technology.value) &
                    (table[COMP_COLUMN].astype(str).str.strip() == component.value))
            if mask.any():
                table.loc[mask, value_col] = value
            else:
                new_rows.append({TECH_COLUMN: technology.value,
                                 COMP_COLUMN: component.value,
                                 value_col: value})
            logger.info(f"Override {technology.value}/{component.value} = {value}")
        if new_rows:
            table = pd.concat([table, pd.DataFrame(new_rows)], ignore_index=True)
        return ParameterTable(table, self.year)

    @classmethod
    def from_records(cls, records: Dict[ParameterKey, float], year: int) -> 'ParameterTable':
        """Build a table from {(technology, component): value} for a single year."""
        table = pd.DataFrame([
            {TECH_COLUMN: tech.value, COMP_COLUMN: comp.value, str(year): value}
            for (tech, comp), value in records.items()
        ], columns=[TECH_COLUMN, COMP_COLUMN, str(year)])
        return cls(table, year)
