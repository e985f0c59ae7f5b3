# energyhub/model/descriptors.py

"""
Technology descriptor tables of the energy hub.

The model builder and the result compiler iterate over these tables instead
of repeating near-identical blocks per storage type or per fuel:

    RENEWABLES      generators driven by an hourly capacity-factor profile
    CONVERTERS      single-output conversion units with fixed input ratios
    RESERVOIRS      storage with an energy capacity and a cyclic SOC
    FUELS           synthetic fuels with an annual demand
    CAPACITY_ITEMS  ordered list of costed capacities (objective and report)

The heat pump (two heat sources with different COPs) and the multi-fuel gas
turbine (hydrogen and methane, equality balance) do not fit the converter
pattern and are modelled by dedicated blocks in the builder.

``HubCoefficients`` resolves every scalar coefficient from the assumptions
table once; builder and compiler share the same instance.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Set, Tuple

from ..constants import waste_heat_pump_cop
from ..interfaces.technologies import Technology, Component, Carrier
from ..interfaces.parameters import ParameterTable, ParameterKey
from ..interfaces.containers import HubSettings


# ------------------------------------------------------------------
# Descriptor types
# ------------------------------------------------------------------

@dataclass(frozen=True)
class RenewableSpec:
    """
    Renewable generator.

    ``power_density_setting`` names the ``HubSettings`` field giving the
    installable MW per km² of used land; ``None`` marks the wave converter,
    bounded by the site's wave potential instead.
    """
    key: str
    technology: Technology
    profile: str
    label: str
    power_density_setting: Optional[str] = None

    @property
    def land_constrained(self) -> bool:
        return self.power_density_setting is not None


@dataclass(frozen=True)
class ConverterSpec:
    """
    Conversion unit producing one carrier from fixed-ratio inputs.

    Attributes
    ----------
    inputs : dict
        {carrier: component} giving the input per unit of output.
    by_products : dict
        {carrier: component} giving co-produced output per unit of output.
    min_load_setting : str, optional
        Name of the ``HubSettings`` field holding the minimum load fraction.
    ramp_costed : bool
        Whether hourly ramp-up is penalised in the objective.
    """
    key: str
    technology: Technology
    output: Carrier
    label: str
    unit: str
    inputs: Dict[Carrier, Component] = field(default_factory=dict)
    by_products: Dict[Carrier, Component] = field(default_factory=dict)
    min_load_setting: Optional[str] = None
    ramp_costed: bool = False


@dataclass(frozen=True)
class ReservoirSpec:
    """
    Storage reservoir. Charge and discharge are bounded by capacity / E-P-ratio.

    Attributes
    ----------
    lossy : bool
        Charge and discharge efficiencies apply (battery); otherwise lossless.
    """
    key: str
    technology: Technology
    carrier: Carrier
    label: str
    unit: str
    lossy: bool = False


class Scaling(Enum):
    """How a capacity variable maps onto the costed quantity."""
    NONE = 'none'
    PER_HOUR = 'per_hour'            # capacity denominated per hour of operation
    POWER_RATING = 'power_rating'    # capacity / E-P-ratio of a reservoir


@dataclass(frozen=True)
class CapacityItem:
    """One costed and reported capacity."""
    label: str
    unit: str
    technology: Technology
    variable: str
    scaling: Scaling = Scaling.NONE
    ep_ratio_of: Optional[Technology] = None


# ------------------------------------------------------------------
# Descriptor tables
# ------------------------------------------------------------------

RENEWABLES: Tuple[RenewableSpec, ...] = (
    RenewableSpec('pv_fixed', Technology.PV_FIXED, 'pvo', 'PV fixed-tilt', 'pv_power_density'),
    RenewableSpec('pv_tracking', Technology.PV_TRACKING, 'pva', 'PV single-axis', 'pv_power_density'),
    RenewableSpec('wind', Technology.ONSHORE_WIND, 'wind', 'Onshore Wind', 'wind_power_density'),
    RenewableSpec('wave', Technology.WAVE, 'wave', 'Wave'),
)

CONVERTERS: Tuple[ConverterSpec, ...] = (
    ConverterSpec(
        'electric_heater', Technology.ELECTRIC_HEATER, Carrier.HEAT,
        'Electric Heater', 'MWh',
        inputs={Carrier.ELECTRICITY: Component.ELECTRICITY_IN},
    ),
    ConverterSpec(
        'electrolyser', Technology.ELECTROLYSER, Carrier.HYDROGEN,
        'Electrolyser', 'MWh,H2',
        inputs={Carrier.ELECTRICITY: Component.ELECTRICITY_IN},
        min_load_setting='electrolyser_min_load',
    ),
    ConverterSpec(
        'dac', Technology.DAC, Carrier.CO2,
        'DAC', 't',
        inputs={Carrier.ELECTRICITY: Component.ELECTRICITY_IN,
                Carrier.HEAT: Component.HEAT_IN},
    ),
    ConverterSpec(
        'methanation', Technology.METHANATION, Carrier.METHANE,
        'CH4', 'MWh,CH4',
        inputs={Carrier.HYDROGEN: Component.HYDROGEN_IN,
                Carrier.CO2: Component.CO2_IN},
    ),
    ConverterSpec(
        'ammonia', Technology.AMMONIA_SYNTHESIS, Carrier.AMMONIA,
        'NH3', 'MWh,NH3',
        inputs={Carrier.ELECTRICITY: Component.ELECTRICITY_IN,
                Carrier.HYDROGEN: Component.HYDROGEN_IN},
        by_products={Carrier.HEAT: Component.EXCESS_HEAT},
        min_load_setting='synthesis_min_load',
        ramp_costed=True,
    ),
    ConverterSpec(
        'methanol', Technology.METHANOL_SYNTHESIS, Carrier.METHANOL,
        'MeOH', 'MWh,MeOH',
        inputs={Carrier.ELECTRICITY: Component.ELECTRICITY_IN,
                Carrier.HYDROGEN: Component.HYDROGEN_IN,
                Carrier.CO2: Component.CO2_IN},
        min_load_setting='synthesis_min_load',
        ramp_costed=True,
    ),
    ConverterSpec(
        'ft', Technology.FISCHER_TROPSCH, Carrier.FT_LIQUID,
        'FT', 'MWh,FT',
        inputs={Carrier.ELECTRICITY: Component.ELECTRICITY_IN,
                Carrier.HYDROGEN: Component.HYDROGEN_IN,
                Carrier.CO2: Component.CO2_IN},
        by_products={Carrier.HEAT: Component.EXCESS_HEAT},
        min_load_setting='synthesis_min_load',
    ),
)

RESERVOIRS: Tuple[ReservoirSpec, ...] = (
    ReservoirSpec('battery', Technology.BATTERY, Carrier.ELECTRICITY,
                  'Battery', 'MWh', lossy=True),
    ReservoirSpec('tes', Technology.THERMAL_STORAGE, Carrier.HEAT,
                  'TES', 'MWh'),
    ReservoirSpec('h2_rock_cavern', Technology.H2_ROCK_CAVERN, Carrier.HYDROGEN,
                  'H2 Storage - lined rock cavern', 'MWh'),
    ReservoirSpec('h2_pipe', Technology.H2_PIPE, Carrier.HYDROGEN,
                  'H2 Storage - underground pipe', 'MWh'),
    ReservoirSpec('co2_storage', Technology.CO2_STORAGE, Carrier.CO2,
                  'CO2 Storage', 't'),
    ReservoirSpec('ch4_storage', Technology.CH4_STORAGE, Carrier.METHANE,
                  'CH4 Storage', 'MWh'),
    ReservoirSpec('nh3_storage', Technology.AMMONIA_STORAGE, Carrier.AMMONIA,
                  'Ammonia storage', 'MWh'),
    ReservoirSpec('meoh_storage', Technology.METHANOL_STORAGE, Carrier.METHANOL,
                  'Methanol storage', 'MWh'),
    ReservoirSpec('ft_storage', Technology.LIQUID_FUEL_STORAGE, Carrier.FT_LIQUID,
                  'Liquid Fuel Storage', 'MWh'),
)

FUELS: Tuple[Carrier, ...] = (Carrier.METHANE, Carrier.AMMONIA, Carrier.METHANOL, Carrier.FT_LIQUID)

# Names of the capacity variables of the dedicated blocks
GAS_TURBINE = 'gas_turbine'
HEAT_PUMP = 'heat_pump'


def capacity_name(key: str) -> str:
    return f"{key}_cap"


CAPACITY_ITEMS: Tuple[CapacityItem, ...] = (
    CapacityItem('PV fixed-tilt', 'MW', Technology.PV_FIXED, capacity_name('pv_fixed')),
    CapacityItem('PV single-axis', 'MW', Technology.PV_TRACKING, capacity_name('pv_tracking')),
    CapacityItem('Wind power', 'MW', Technology.ONSHORE_WIND, capacity_name('wind')),
    CapacityItem('Wave power', 'MW', Technology.WAVE, capacity_name('wave')),
    CapacityItem('Gas Turbine', 'MW', Technology.GAS_TURBINE, capacity_name(GAS_TURBINE)),
    CapacityItem('Battery capacity', 'MWh', Technology.BATTERY, capacity_name('battery')),
    CapacityItem('Battery Interface', 'MW', Technology.BATTERY_INTERFACE, capacity_name('battery'),
                 Scaling.POWER_RATING, Technology.BATTERY),
    CapacityItem('Heat Pump', 'MW', Technology.HEAT_PUMP, capacity_name(HEAT_PUMP)),
    CapacityItem('Electric Heater', 'MW', Technology.ELECTRIC_HEATER, capacity_name('electric_heater')),
    CapacityItem('TES', 'MWh', Technology.THERMAL_STORAGE, capacity_name('tes')),
    CapacityItem('Electrolyser', 'MW', Technology.ELECTROLYSER, capacity_name('electrolyser')),
    CapacityItem('H2 Storage - lined rock cavern', 'MWh', Technology.H2_ROCK_CAVERN,
                 capacity_name('h2_rock_cavern')),
    CapacityItem('H2 Storage - underground pipe', 'MWh', Technology.H2_PIPE,
                 capacity_name('h2_pipe')),
    CapacityItem('DAC', 't/h', Technology.DAC, capacity_name('dac'), Scaling.PER_HOUR),
    CapacityItem('CO2 Storage', 't', Technology.CO2_STORAGE, capacity_name('co2_storage')),
    CapacityItem('Methanation', 'MW', Technology.METHANATION, capacity_name('methanation')),
    CapacityItem('CH4 Storage', 'MWh', Technology.CH4_STORAGE, capacity_name('ch4_storage')),
    CapacityItem('Ammonia synthesis', 'MW', Technology.AMMONIA_SYNTHESIS, capacity_name('ammonia')),
    CapacityItem('Ammonia storage', 'MWh', Technology.AMMONIA_STORAGE, capacity_name('nh3_storage')),
    CapacityItem('Methanol synthesis', 'MW', Technology.METHANOL_SYNTHESIS, capacity_name('methanol')),
    CapacityItem('Methanol storage', 'MWh', Technology.METHANOL_STORAGE, capacity_name('meoh_storage')),
    CapacityItem('FT', 'MW', Technology.FISCHER_TROPSCH, capacity_name('ft')),
    CapacityItem('Liquid Fuel Storage', 'MWh', Technology.LIQUID_FUEL_STORAGE, capacity_name('ft_storage')),
)


# ------------------------------------------------------------------
# Required parameters
# ------------------------------------------------------------------

def required_parameters() -> Set[ParameterKey]:
    """Every (technology, component) key the model reads from the table."""
    keys: Set[ParameterKey] = set()
    for item in CAPACITY_ITEMS:
        keys.update({(item.technology, Component.CAPEX),
                     (item.technology, Component.OPEX),
                     (item.technology, Component.LIFETIME)})
        if item.ep_ratio_of is not None:
            keys.add((item.ep_ratio_of, Component.EP_RATIO))
    for conv in CONVERTERS:
        keys.update((conv.technology, comp) for comp in conv.inputs.values())
        keys.update((conv.technology, comp) for comp in conv.by_products.values())
        if conv.ramp_costed:
            keys.add((conv.technology, Component.RAMP_UP))
    for res in RESERVOIRS:
        keys.add((res.technology, Component.EP_RATIO))
        if res.lossy:
            keys.update({(res.technology, Component.CHARGING_EFF),
                         (res.technology, Component.DISCHARGING_EFF)})
    keys.update({
        (Technology.GAS_TURBINE, Component.HYDROGEN_IN),
        (Technology.GAS_TURBINE, Component.GAS_IN),
        (Technology.HEAT_PUMP, Component.COP),
        (Technology.ELECTROLYSER, Component.WASTE_HEAT_RECOVERY),
    })
    return keys


# ------------------------------------------------------------------
# Resolved coefficients
# ------------------------------------------------------------------

@dataclass(frozen=True)
class HubCoefficients:
    """
    Scalar coefficients resolved from the assumptions table.

    Attributes
    ----------
    converter_inputs : dict
        {(converter key, carrier): input per unit output}.
    converter_by_products : dict
        {(converter key, carrier): co-product per unit output}.
    ep_ratio : dict
        {technology: E/P ratio} of every reservoir.
    efficiency : dict
        {reservoir key: (charge, discharge)}; (1, 1) for lossless storage.
    ramp_cost : dict
        {converter key: cost per MW of ramp-up}.
    """
    converter_inputs: Dict[Tuple[str, Carrier], float]
    converter_by_products: Dict[Tuple[str, Carrier], float]
    ep_ratio: Dict[Technology, float]
    efficiency: Dict[str, Tuple[float, float]]
    ramp_cost: Dict[str, float]
    capex: Dict[Technology, float]
    opex: Dict[Technology, float]
    gas_turbine_h2_efficiency: float
    gas_turbine_ch4_efficiency: float
    cop_ambient: float
    cop_waste_heat: float
    waste_heat_recovery: float
    hours: int

    @classmethod
    def resolve(cls, params: ParameterTable, settings: HubSettings) -> 'HubCoefficients':
        """
        Resolve all coefficients, failing before any model is built.

        Raises
        ------
        ParameterNotFoundError, AmbiguousParameterError
            If the table cannot serve a required key.
        InvalidParameterError
            If a lifetime is not positive.
        """
        params.validate(required_parameters())

        inputs = {(c.key, carrier): params.lookup(c.technology, comp)
                  for c in CONVERTERS for carrier, comp in c.inputs.items()}
        by_products = {(c.key, carrier): params.lookup(c.technology, comp)
                       for c in CONVERTERS for carrier, comp in c.by_products.items()}
        ep_ratio = {r.technology: params.lookup(r.technology, Component.EP_RATIO)
                    for r in RESERVOIRS}
        efficiency = {}
        for r in RESERVOIRS:
            if r.lossy:
                efficiency[r.key] = (params.lookup(r.technology, Component.CHARGING_EFF),
                                     params.lookup(r.technology, Component.DISCHARGING_EFF))
            else:
                efficiency[r.key] = (1.0, 1.0)
        ramp_cost = {c.key: params.lookup(c.technology, Component.RAMP_UP)
                     for c in CONVERTERS if c.ramp_costed}

        technologies = {item.technology for item in CAPACITY_ITEMS}
        capex = {t: params.annualized_capex(t, settings.discount_rate) for t in technologies}
        opex = {t: params.opex(t) for t in technologies}

        return cls(
            converter_inputs=inputs,
            converter_by_products=by_products,
            ep_ratio=ep_ratio,
            efficiency=efficiency,
            ramp_cost=ramp_cost,
            capex=capex,
            opex=opex,
            gas_turbine_h2_efficiency=params.lookup(Technology.GAS_TURBINE, Component.HYDROGEN_IN),
            gas_turbine_ch4_efficiency=params.lookup(Technology.GAS_TURBINE, Component.GAS_IN),
            cop_ambient=params.lookup(Technology.HEAT_PUMP, Component.COP),
            cop_waste_heat=waste_heat_pump_cop(settings.waste_heat_sink_temperature,
                                               settings.waste_heat_source_temperature),
            waste_heat_recovery=params.lookup(Technology.ELECTROLYSER, Component.WASTE_HEAT_RECOVERY),
            hours=settings.hours,
        )

    def input_ratio(self, converter: str, carrier: Carrier) -> float:
        return self.converter_inputs.get((converter, carrier), 0.0)

    def by_product_ratio(self, converter: str, carrier: Carrier) -> float:
        return self.converter_by_products.get((converter, carrier), 0.0)

    def capacity_multiplier(self, item: CapacityItem) -> float:
        """Factor turning the capacity variable into the costed quantity."""
        if item.scaling is Scaling.PER_HOUR:
            return float(self.hours)
        if item.scaling is Scaling.POWER_RATING:
            return 1.0 / self.ep_ratio[item.ep_ratio_of]
        return 1.0

    def reported_capacity(self, item: CapacityItem, value: float) -> float:
        """Capacity in the item's own unit (power rating for interfaces)."""
        if item.scaling is Scaling.POWER_RATING:
            return value / self.ep_ratio[item.ep_ratio_of]
        return value

    def annual_investment(self, item: CapacityItem) -> float:
        """Annualized CAPEX per unit of the capacity variable."""
        return self.capex[item.technology] * self.capacity_multiplier(item)

    def annual_opex(self, item: CapacityItem) -> float:
        """OPEX per unit of the capacity variable."""
        return self.opex[item.technology] * self.capacity_multiplier(item)
