# energyhub/interfaces/containers.py

"""
Input containers for one energy hub optimisation run.

This module defines the immutable containers handed to the model builder:

    HubSettings     (horizon, discount rate, siting densities, min loads)
    FuelDemand      (annual demand per synthetic fuel, MWh/year)
    SiteConditions  (land area, wave resource potential)
    HourlyProfiles  (capacity factors of the four renewable sources)
    HubInputs       (aggregate of the above, validated on construction)

Design principles:
- Immutable after construction (frozen dataclasses)
- Validation runs automatically in __post_init__
- Inputs are read-only for the duration of a build
"""

import logging
import numpy as np
import pandas as pd
from dataclasses import dataclass, field, fields
from typing import Dict, Any, Optional

from ..constants import (
    HOURS_PER_YEAR,
    DEFAULT_YEAR,
    DISCOUNT_RATE,
    LAND_USE_FRACTION,
    PV_POWER_DENSITY,
    WIND_POWER_DENSITY,
    ELECTROLYSER_MIN_LOAD,
    SYNTHESIS_MIN_LOAD,
    WASTE_HEAT_SINK_TEMPERATURE,
    WASTE_HEAT_SOURCE_TEMPERATURE,
    PROFILE_NAMES,
)
from ..exceptions import ProfileError, ProfileLengthError
from .technologies import Carrier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HubSettings:
    """
    Model-wide settings.

    Attributes
    ----------
    hours : int
        Number of hourly steps in the horizon (8760 for a full year).
        Shorter horizons are only meant for quick studies and tests.
    year : int
        Horizon year of the assumptions table.
    discount_rate : float
        Discount rate of the capital recovery factor.
    land_use_fraction : float
        Share of the land area usable by onshore renewables.
    pv_power_density, wind_power_density : float
        Installable power per km² of used land [MW/km²].
    electrolyser_min_load, synthesis_min_load : float
        Minimum hourly load as a fraction of installed capacity.
    waste_heat_sink_temperature, waste_heat_source_temperature : float
        Temperatures [°C] setting the COP of the waste-heat heat pump.
    """
    hours: int = HOURS_PER_YEAR
    year: int = DEFAULT_YEAR
    discount_rate: float = DISCOUNT_RATE
    land_use_fraction: float = LAND_USE_FRACTION
    pv_power_density: float = PV_POWER_DENSITY
    wind_power_density: float = WIND_POWER_DENSITY
    electrolyser_min_load: float = ELECTROLYSER_MIN_LOAD
    synthesis_min_load: float = SYNTHESIS_MIN_LOAD
    waste_heat_sink_temperature: float = WASTE_HEAT_SINK_TEMPERATURE
    waste_heat_source_temperature: float = WASTE_HEAT_SOURCE_TEMPERATURE

    def __post_init__(self):
        if self.hours < 2:
            raise ValueError(f"Horizon must have at least 2 hours, got {self.hours}")
        if not 0 <= self.discount_rate <= 1:
            raise ValueError(f"Discount rate must be in [0, 1], got {self.discount_rate}")
        if not 0 < self.land_use_fraction <= 1:
            raise ValueError(f"Land use fraction must be in (0, 1], got {self.land_use_fraction}")
        for name in ('electrolyser_min_load', 'synthesis_min_load'):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if self.hours != HOURS_PER_YEAR:
            logger.info(f"Using a {self.hours}-hour horizon instead of a full year")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'HubSettings':
        """Build settings from a config mapping, rejecting unknown keys."""
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown settings: {sorted(unknown)}")
        return cls(**data)


@dataclass(frozen=True)
class FuelDemand:
    """
    Annual offtake of each synthetic fuel [MWh/year].

    The model serves it as a constant hourly demand (annual / hours).
    """
    ammonia: float = 0.0
    methane: float = 0.0
    methanol: float = 0.0
    ft_liquid: float = 0.0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0 or np.isnan(value):
                raise ValueError(f"Annual {f.name} demand must be non-negative, got {value}")

    def annual(self, carrier: Carrier) -> float:
        return getattr(self, carrier.value)

    def hourly(self, carrier: Carrier, hours: int) -> float:
        return self.annual(carrier) / hours

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> 'FuelDemand':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown fuel demands: {sorted(unknown)}")
        return cls(**{k: float(v) for k, v in data.items()})


@dataclass(frozen=True)
class SiteConditions:
    """
    Siting limits of one location.

    Attributes
    ----------
    land_area : float
        Land available to onshore renewables [km²].
    wave_potential : float
        Wave resource potential [MW].
    """
    land_area: float = 0.0
    wave_potential: float = 0.0

    def __post_init__(self):
        if self.land_area < 0:
            raise ValueError(f"Land area must be non-negative, got {self.land_area}")
        if self.wave_potential < 0:
            raise ValueError(f"Wave potential must be non-negative, got {self.wave_potential}")


@dataclass(frozen=True)
class HourlyProfiles:
    """
    Hourly capacity factors of the renewable sources.

    Attributes
    ----------
    data : pd.DataFrame
        Columns ``pvo`` (PV fixed-tilt), ``pva`` (PV single-axis),
        ``wind`` and ``wave``; exactly one row per horizon hour. Extra
        columns are ignored.
    """
    data: pd.DataFrame

    def validate(self, hours: int) -> None:
        """
        Check profile presence, length and values.

        Raises
        ------
        ProfileError
            If a profile column is missing or contains NaN.
        ProfileLengthError
            If a profile does not hold exactly ``hours`` values.
        """
        missing = [name for name in PROFILE_NAMES if name not in self.data.columns]
        if missing:
            raise ProfileError(f"Missing hourly profiles: {missing}")

        for name in PROFILE_NAMES:
            series = self.data[name]
            if len(series) != hours:
                raise ProfileLengthError(
                    f"Profile '{name}' has {len(series)} values, expected {hours}"
                )
            if series.isna().any():
                raise ProfileError(
                    f"Profile '{name}' contains {int(series.isna().sum())} missing values"
                )
            if (series < 0).any() or (series > 1).any():
                logger.warning(
                    f"Profile '{name}' has values outside [0, 1] "
                    f"(min {series.min():.3f}, max {series.max():.3f})"
                )

    def get(self, name: str) -> np.ndarray:
        return self.data[name].to_numpy(dtype=float)

    @classmethod
    def from_arrays(cls, **profiles) -> 'HourlyProfiles':
        return cls(pd.DataFrame({name: np.asarray(values, dtype=float)
                                 for name, values in profiles.items()}))


@dataclass(frozen=True)
class HubInputs:
    """
    Complete input of one optimisation run.

    Validation runs in ``__post_init__``: a profile of the wrong length
    aborts before any model is built.

    Examples
    --------
    >>> inputs = HubInputs(
    ...     profiles=HourlyProfiles(profile_df),
    ...     demand=FuelDemand(ammonia=1e6, methanol=2e6),
    ...     site=SiteConditions(land_area=31219, wave_potential=646e3),
    ... )
    """
    profiles: HourlyProfiles
    demand: FuelDemand = field(default_factory=FuelDemand)
    site: SiteConditions = field(default_factory=SiteConditions)
    settings: HubSettings = field(default_factory=HubSettings)

    def __post_init__(self):
        self.profiles.validate(self.settings.hours)

    @property
    def hours(self) -> int:
        return self.settings.hours
