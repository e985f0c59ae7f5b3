# energyhub/input/structures.py

"""
Typed run configuration, as parsed from a YAML run file.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..interfaces.containers import HubSettings, FuelDemand, SiteConditions
from ..interfaces.parameters import ParameterKey


@dataclass(frozen=True)
class LocationConfig:
    """
    One location and its land-availability scenarios.

    Attributes
    ----------
    name : str
        Location name, used in output file names.
    profiles_path : str
        CSV with the hourly ``pvo``, ``pva``, ``wind``, ``wave`` columns.
    demand : FuelDemand
        Annual fuel demand served at this location.
    wave_potential : float
        Wave resource potential [MW].
    overrides : dict
        {(technology, component): value} patched into the assumptions
        (e.g. location-specific wave CAPEX).
    scenarios : dict
        {scenario name: SiteConditions}.
    """
    name: str
    profiles_path: str
    demand: FuelDemand
    wave_potential: float = 0.0
    overrides: Dict[ParameterKey, float] = field(default_factory=dict)
    scenarios: Dict[str, SiteConditions] = field(default_factory=dict)

    def __post_init__(self):
        if not self.scenarios:
            raise ValueError(f"Location '{self.name}' defines no scenarios")


@dataclass(frozen=True)
class RunConfig:
    """
    Complete batch run: assumptions, settings, solver and locations.

    ``assumptions_sheet`` names the workbook sheet when the assumptions are
    an Excel file; ``None`` reads the first sheet.
    """
    assumptions_path: str
    settings: HubSettings
    locations: List[LocationConfig]
    output_dir: Optional[str] = None
    solver: Dict[str, Any] = field(default_factory=dict)
    assumptions_sheet: Optional[str] = None

    @property
    def year(self) -> int:
        return self.settings.year

    @property
    def n_scenarios(self) -> int:
        return sum(len(loc.scenarios) for loc in self.locations)
