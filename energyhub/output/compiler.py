# energyhub/output/compiler.py

"""
Result compiler: derives reporting quantities from a solved energy hub.

All quantities are recomputed from the solved variables with the same
``HubCoefficients`` and ``CAPACITY_ITEMS`` the model builder used for the
constraints and the objective, so report and model cannot drift apart.
The compiler is read-only: it never modifies the model or the solution.

Example
-------
>>> compiler = ResultCompiler(model, solution)
>>> report = compiler.report()
>>> report.to_frame().head()
>>> compiler.verify()
[]
"""

import logging
import numpy as np
import pandas as pd
from typing import List

from ..constants import TOL, COST_UNIT_TO_EUR, COST_UNIT_TO_MEUR
from ..interfaces.results import HubReport, HubSolution, ReportRow
from ..interfaces.technologies import Carrier
from ..model.builder import HubModel
from ..model.descriptors import (
    RENEWABLES,
    CONVERTERS,
    RESERVOIRS,
    CAPACITY_ITEMS,
    GAS_TURBINE,
    HEAT_PUMP,
    capacity_name,
)

logger = logging.getLogger(__name__)


class ResultCompiler:
    """
    Builds the structured report and dispatch tables of a solved hub.

    Parameters
    ----------
    model : HubModel
        The model that was solved.
    solution : HubSolution
        Its optimal point.
    """

    def __init__(self, model: HubModel, solution: HubSolution):
        if len(solution.x) != model.program.nvars:
            raise ValueError(
                f"Solution has {len(solution.x)} entries, "
                f"model has {model.program.nvars} variables"
            )
        self.model = model
        self.solution = solution
        self.coefficients = model.coefficients

    def _total(self, name: str) -> float:
        return float(np.sum(self.solution[name]))

    def _renewable_output(self, spec) -> np.ndarray:
        return self.solution[capacity_name(spec.key)] * self.model.inputs.profiles.get(spec.profile)

    # =========================================================================
    # Report
    # =========================================================================

    def report(self) -> HubReport:
        """Compile the full report, section by section."""
        rows: List[ReportRow] = [
            ReportRow('System Cost', 'System Cost', 'MEUR',
                      self.solution.objective * COST_UNIT_TO_MEUR)
        ]
        rows += self._capacity_rows()
        rows += self._output_rows()
        rows += self._consumption_rows()
        rows += self._cost_rows()

        report = HubReport(rows)
        report.validate()
        logger.info(f"Compiled report with {len(rows)} rows, "
                    f"system cost {report.system_cost:.3f} MEUR")
        return report

    def _capacity_rows(self) -> List[ReportRow]:
        coef = self.coefficients
        return [
            ReportRow('Capacity', item.label, item.unit,
                      coef.reported_capacity(item, self.solution[item.variable]))
            for item in CAPACITY_ITEMS
        ]

    def _output_rows(self) -> List[ReportRow]:
        rows = [
            ReportRow('Output', f"{spec.label} electricity", 'MWh',
                      float(self._renewable_output(spec).sum()))
            for spec in RENEWABLES
        ]
        rows.append(ReportRow('Output', 'Gas Turbine electricity', 'MWh',
                              self._total(f"{GAS_TURBINE}_prod")))
        rows.append(ReportRow('Output', 'Heat Pump heat', 'MWh',
                              self._total(f"{HEAT_PUMP}_waste_heat_prod")
                              + self._total(f"{HEAT_PUMP}_ambient_prod")))
        rows += [
            ReportRow('Output', f"{spec.label} production", spec.unit,
                      self._total(f"{spec.key}_prod"))
            for spec in CONVERTERS
        ]
        return rows

    def _converter_consumption(self, section: str, carrier: Carrier,
                               name: str, unit: str) -> List[ReportRow]:
        coef = self.coefficients
        return [
            ReportRow(section, f"{spec.label} {name} consumption", unit,
                      self._total(f"{spec.key}_prod") * coef.input_ratio(spec.key, carrier))
            for spec in CONVERTERS if carrier in spec.inputs
        ]

    def _consumption_rows(self) -> List[ReportRow]:
        coef = self.coefficients
        rows = [ReportRow(
            'Electricity in', 'Heat Pump electricity consumption', 'MWh',
            self._total(f"{HEAT_PUMP}_waste_heat_prod") / coef.cop_waste_heat
            + self._total(f"{HEAT_PUMP}_ambient_prod") / coef.cop_ambient
        )]
        rows += self._converter_consumption('Electricity in', Carrier.ELECTRICITY, 'electricity', 'MWh')
        rows.append(ReportRow('Gas in', 'Gas Turbine CH4 consumption', 'MWh',
                              self._total(f"{GAS_TURBINE}_ch4_cons")))
        rows.append(ReportRow('Hydrogen in', 'Gas Turbine H2 consumption', 'MWh',
                              self._total(f"{GAS_TURBINE}_h2_cons")))
        rows += self._converter_consumption('Hydrogen in', Carrier.HYDROGEN, 'H2', 'MWh')
        rows += self._converter_consumption('CO2 in', Carrier.CO2, 'CO2', 't')
        return rows

    def _cost_rows(self) -> List[ReportRow]:
        coef = self.coefficients
        rows = []
        for section, per_unit in (('Annual Inv', coef.annual_investment),
                                  ('Opex', coef.annual_opex)):
            rows += [
                ReportRow(section, item.label, 'EUR',
                          COST_UNIT_TO_EUR * per_unit(item) * self.solution[item.variable])
                for item in CAPACITY_ITEMS
            ]
        rows += [
            ReportRow('Ramping', f"{spec.label} ramp-up", 'EUR',
                      COST_UNIT_TO_EUR * coef.ramp_cost[spec.key]
                      * self._total(f"{spec.key}_ramp_up"))
            for spec in CONVERTERS if spec.ramp_costed
        ]
        return rows

    # =========================================================================
    # Tables
    # =========================================================================

    def dispatch_frame(self) -> pd.DataFrame:
        """
        Hourly schedule: renewable output plus every hourly variable.

        Returns
        -------
        pd.DataFrame
            One column per series, index ``HOUR`` running 1..H.
        """
        hours = self.model.hours
        columns = {f"{spec.key}_prod": self._renewable_output(spec) for spec in RENEWABLES}
        for name, var in self.model.program.variables.items():
            if var.ndim == 1:
                columns[name] = self.solution[name]
        frame = pd.DataFrame(columns, index=pd.RangeIndex(1, hours + 1, name='HOUR'))
        return frame

    def capacity_frame(self) -> pd.DataFrame:
        """Installed capacities with columns ``TECHNOLOGY, UNIT, VALUE``."""
        rows = self._capacity_rows()
        return pd.DataFrame({
            'TECHNOLOGY': [r.label for r in rows],
            'UNIT': [r.unit for r in rows],
            'VALUE': [r.value for r in rows],
        })

    # =========================================================================
    # Verification
    # =========================================================================

    def verify(self, tol: float = TOL) -> List[str]:
        """
        Re-check the operating limits on the solved values.

        Checks storage periodicity and bounds, charge/discharge rate limits,
        minimum loads and the gas-turbine fuel equality. Tolerances are
        relative to the magnitude of the capacity involved.

        Returns
        -------
        list of str
            One message per violated check; empty if all hold.
        """
        violations = []
        violations += self._check_reservoirs(tol)
        violations += self._check_min_loads(tol)
        violations += self._check_gas_turbine(tol)
        for message in violations:
            logger.warning(message)
        return violations

    def _check_reservoirs(self, tol: float) -> List[str]:
        coef = self.coefficients
        sol = self.solution
        found = []
        for spec in RESERVOIRS:
            cap = sol[capacity_name(spec.key)]
            charge = sol[f"{spec.key}_charge"]
            discharge = sol[f"{spec.key}_discharge"]
            soc = sol[f"{spec.key}_soc"]
            eta_charge, eta_discharge = coef.efficiency[spec.key]
            eps = tol * max(1.0, abs(cap))

            wrap = soc[-1] + charge[-1] * eta_charge - discharge[-1] / eta_discharge
            if abs(soc[0] - wrap) > eps:
                found.append(f"{spec.label}: SOC not periodic ({soc[0]:.6g} vs {wrap:.6g})")
            if soc.max() > cap + eps or soc.min() < -eps:
                found.append(f"{spec.label}: SOC outside [0, {cap:.6g}]")
            rate = cap / coef.ep_ratio[spec.technology]
            if max(charge.max(), discharge.max()) > rate + eps:
                found.append(f"{spec.label}: charge/discharge above rate limit {rate:.6g}")
        return found

    def _check_min_loads(self, tol: float) -> List[str]:
        settings = self.model.inputs.settings
        found = []
        for spec in CONVERTERS:
            if spec.min_load_setting is None:
                continue
            cap = self.solution[capacity_name(spec.key)]
            prod = self.solution[f"{spec.key}_prod"]
            floor = getattr(settings, spec.min_load_setting) * cap
            if prod.min() < floor - tol * max(1.0, abs(cap)):
                found.append(f"{spec.label}: production {prod.min():.6g} below minimum load {floor:.6g}")
        return found

    def _check_gas_turbine(self, tol: float) -> List[str]:
        coef = self.coefficients
        sol = self.solution
        prod = sol[f"{GAS_TURBINE}_prod"]
        fuel = (sol[f"{GAS_TURBINE}_h2_cons"] * coef.gas_turbine_h2_efficiency
                + sol[f"{GAS_TURBINE}_ch4_cons"] * coef.gas_turbine_ch4_efficiency)
        gap = np.abs(prod - fuel).max()
        if gap > tol * max(1.0, abs(sol[capacity_name(GAS_TURBINE)])):
            return [f"Gas turbine: output differs from fuel input by {gap:.6g}"]
        return []
