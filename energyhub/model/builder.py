# energyhub/model/builder.py

"""
Model builder for the energy hub capacity-expansion and dispatch LP.

The builder declares every decision variable with its bounds on a
``linopy.Model`` and assembles the hourly balances of electricity, heat,
hydrogen, CO2 and the four synthetic fuels, the storage dynamics, the
capacity, minimum-load and ramping limits, and the annualized cost
objective.

Capacities are dimensionless variables; dispatch variables carry one
``hour`` dimension of the horizon length, so capacity terms broadcast over
the horizon inside the hourly constraints.

Each technology block registers what it supplies to and draws from the
carrier balances; the balances themselves are assembled last, so blocks can
be added in any order.

Example
-------
>>> model = EnergyHubModelBuilder(inputs, params).build()
>>> model.program.nvars
359182
>>> model.program.constraints['balance_hydrogen']
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from functools import reduce
from operator import add
from typing import Dict, List

import linopy
import numpy as np
import pandas as pd

from ..interfaces.containers import HubInputs
from ..interfaces.parameters import ParameterTable
from ..interfaces.technologies import Carrier
from .descriptors import (
    RENEWABLES,
    CONVERTERS,
    RESERVOIRS,
    FUELS,
    CAPACITY_ITEMS,
    GAS_TURBINE,
    HEAT_PUMP,
    HubCoefficients,
    capacity_name,
)

logger = logging.getLogger(__name__)

HOUR = 'hour'


@dataclass(frozen=True)
class HubModel:
    """
    An assembled energy hub LP together with the data it was built from.

    Attributes
    ----------
    program : linopy.Model
        Variables, constraints and objective.
    coefficients : HubCoefficients
        Resolved technology coefficients, shared with the result compiler.
    inputs : HubInputs
        Profiles, demands, siting and settings of the run.
    """
    program: linopy.Model
    coefficients: HubCoefficients
    inputs: HubInputs

    @property
    def hours(self) -> int:
        return self.inputs.hours


class EnergyHubModelBuilder:
    """
    Assembles the energy hub LP for one set of inputs.

    Parameters
    ----------
    inputs : HubInputs
        Validated profiles, demands, siting and settings.
    params : ParameterTable
        Technology assumptions for the horizon year.

    Raises
    ------
    ValueError
        If the table's horizon year differs from the settings' year.
    ParameterNotFoundError, AmbiguousParameterError
        If the assumptions cannot serve every required parameter.
    """

    def __init__(self, inputs: HubInputs, params: ParameterTable):
        if params.year != inputs.settings.year:
            raise ValueError(
                f"Assumptions resolved for {params.year}, settings ask for {inputs.settings.year}"
            )
        self.inputs = inputs
        self.settings = inputs.settings
        self.hours = inputs.hours
        self.coefficients = HubCoefficients.resolve(params, self.settings)
        self.program = linopy.Model()
        self.hour_index = pd.RangeIndex(self.hours, name=HOUR)

        self._supply: Dict[Carrier, List[linopy.LinearExpression]] = defaultdict(list)
        self._use: Dict[Carrier, List[linopy.LinearExpression]] = defaultdict(list)
        self._built = False

    def build(self) -> HubModel:
        """Declare all variables and constraints and return the model."""
        if self._built:
            raise RuntimeError("Model already built; create a new builder")

        self._add_renewables()
        self._add_land_use()
        self._add_converters()
        self._add_heat_pump()
        self._add_gas_turbine()
        self._add_reservoirs()
        self._add_balances()
        self._add_objective()
        self._built = True

        logger.info(
            f"Built energy hub model: {self.program.nvars} variables, "
            f"{self.program.ncons} constraints over {self.hours} hours"
        )
        return HubModel(self.program, self.coefficients, self.inputs)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _capacity(self, key: str, upper: float = np.inf) -> linopy.Variable:
        return self.program.add_variables(lower=0, upper=upper, name=capacity_name(key))

    def _hourly(self, name: str) -> linopy.Variable:
        return self.program.add_variables(lower=0, coords=[self.hour_index], name=name)

    def _following_hours(self, expr):
        """Rows of every hour but the first."""
        return expr.isel({HOUR: slice(1, None)})

    # =========================================================================
    # Generation
    # =========================================================================

    def _add_renewables(self) -> None:
        site = self.inputs.site
        for spec in RENEWABLES:
            if spec.land_constrained:
                density = getattr(self.settings, spec.power_density_setting)
                upper = site.land_area * self.settings.land_use_fraction * density
            else:
                upper = site.wave_potential
            cap = self._capacity(spec.key, upper=upper)
            profile = pd.Series(self.inputs.profiles.get(spec.profile), index=self.hour_index)
            self._supply[Carrier.ELECTRICITY].append(cap * profile)

    def _add_land_use(self) -> None:
        land_use = [
            self.program.variables[capacity_name(spec.key)]
            * (1.0 / (self.settings.land_use_fraction
                      * getattr(self.settings, spec.power_density_setting)))
            for spec in RENEWABLES if spec.land_constrained
        ]
        self.program.add_constraints(
            reduce(add, land_use) <= self.inputs.site.land_area, name='land_use'
        )

    # =========================================================================
    # Conversion
    # =========================================================================

    def _add_converters(self) -> None:
        coef = self.coefficients
        for spec in CONVERTERS:
            cap = self._capacity(spec.key)
            prod = self._hourly(f"{spec.key}_prod")

            self.program.add_constraints(prod - cap <= 0, name=f"{spec.key}_cap_max")
            if spec.min_load_setting is not None:
                min_load = getattr(self.settings, spec.min_load_setting)
                self.program.add_constraints(
                    prod - cap * min_load >= 0, name=f"{spec.key}_cap_min"
                )

            self._supply[spec.output].append(prod.to_linexpr())
            for carrier in spec.inputs:
                self._use[carrier].append(prod * coef.input_ratio(spec.key, carrier))
            for carrier in spec.by_products:
                self._supply[carrier].append(prod * coef.by_product_ratio(spec.key, carrier))

            if spec.ramp_costed:
                self._add_ramp_up(spec.key, prod)

    def _add_ramp_up(self, key: str, prod: linopy.Variable) -> None:
        # Hour 1 has no predecessor: its ramp variable is only bounded below
        ramp = self._hourly(f"{key}_ramp_up")
        increase = self._following_hours(prod) - self._following_hours(prod.shift({HOUR: 1}))
        self.program.add_constraints(
            self._following_hours(ramp) - increase >= 0, name=f"{key}_ramp_up"
        )

    def _add_heat_pump(self) -> None:
        coef = self.coefficients
        cap = self._capacity(HEAT_PUMP)
        waste_heat = self._hourly(f"{HEAT_PUMP}_waste_heat_prod")
        ambient = self._hourly(f"{HEAT_PUMP}_ambient_prod")
        electrolyser = self.program.variables['electrolyser_prod']

        self.program.add_constraints(
            waste_heat + ambient - cap <= 0, name=f"{HEAT_PUMP}_cap_max"
        )
        self.program.add_constraints(
            waste_heat - electrolyser * coef.waste_heat_recovery <= 0,
            name=f"{HEAT_PUMP}_waste_heat_limit",
        )

        self._supply[Carrier.HEAT].append(waste_heat + ambient)
        self._use[Carrier.ELECTRICITY].append(
            waste_heat * (1.0 / coef.cop_waste_heat) + ambient * (1.0 / coef.cop_ambient)
        )

    def _add_gas_turbine(self) -> None:
        coef = self.coefficients
        cap = self._capacity(GAS_TURBINE)
        prod = self._hourly(f"{GAS_TURBINE}_prod")
        h2 = self._hourly(f"{GAS_TURBINE}_h2_cons")
        ch4 = self._hourly(f"{GAS_TURBINE}_ch4_cons")

        self.program.add_constraints(prod - cap <= 0, name=f"{GAS_TURBINE}_cap_max")
        self.program.add_constraints(
            prod - h2 * coef.gas_turbine_h2_efficiency - ch4 * coef.gas_turbine_ch4_efficiency == 0,
            name=f"{GAS_TURBINE}_fuel",
        )

        self._supply[Carrier.ELECTRICITY].append(prod.to_linexpr())
        self._use[Carrier.HYDROGEN].append(h2.to_linexpr())
        self._use[Carrier.METHANE].append(ch4.to_linexpr())

    # =========================================================================
    # Storage
    # =========================================================================

    def _add_reservoirs(self) -> None:
        coef = self.coefficients
        for spec in RESERVOIRS:
            cap = self._capacity(spec.key)
            charge = self._hourly(f"{spec.key}_charge")
            discharge = self._hourly(f"{spec.key}_discharge")
            soc = self._hourly(f"{spec.key}_soc")
            eta_charge, eta_discharge = coef.efficiency[spec.key]

            rate = cap * (1.0 / coef.ep_ratio[spec.technology])
            self.program.add_constraints(charge - rate <= 0, name=f"{spec.key}_charge_max")
            self.program.add_constraints(discharge - rate <= 0, name=f"{spec.key}_discharge_max")

            # Rolling wraps the last hour into the first: no net inventory
            # change over the horizon
            self.program.add_constraints(
                soc - soc.roll({HOUR: 1})
                - charge.roll({HOUR: 1}) * eta_charge
                + discharge.roll({HOUR: 1}) * (1.0 / eta_discharge) == 0,
                name=f"{spec.key}_soc_balance",
            )
            self.program.add_constraints(soc - cap <= 0, name=f"{spec.key}_soc_max")

            self._supply[spec.carrier].append(discharge.to_linexpr())
            self._use[spec.carrier].append(charge.to_linexpr())

    # =========================================================================
    # Balances and objective
    # =========================================================================

    def _add_balances(self) -> None:
        demand = {carrier: self.inputs.demand.hourly(carrier, self.hours) for carrier in FUELS}
        for carrier in Carrier:
            net = reduce(add, self._supply[carrier])
            if self._use[carrier]:
                net = net - reduce(add, self._use[carrier])
            self.program.add_constraints(
                net >= demand.get(carrier, 0.0), name=f"balance_{carrier.value}"
            )

    def _add_objective(self) -> None:
        coef = self.coefficients
        terms = []
        for item in CAPACITY_ITEMS:
            cap = self.program.variables[item.variable]
            terms.append(cap * (coef.annual_investment(item) + coef.annual_opex(item)))
        for spec in CONVERTERS:
            if spec.ramp_costed:
                ramp = self.program.variables[f"{spec.key}_ramp_up"]
                terms.append(ramp.sum() * coef.ramp_cost[spec.key])
        self.program.add_objective(reduce(add, terms), sense='min')
