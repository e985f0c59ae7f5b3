# energyhub/input/reader.py

"""
Reads technology assumptions, hourly profiles and YAML run configurations.
"""

import logging
import os
import pandas as pd
import yaml
from typing import Any, Dict, Optional

from ..constants import PROFILE_NAMES
from ..exceptions import ProfileError
from ..interfaces.containers import HubSettings, FuelDemand, SiteConditions, HourlyProfiles
from ..interfaces.parameters import ParameterTable, ParameterKey
from ..interfaces.technologies import parse_technology, parse_component
from .structures import LocationConfig, RunConfig

logger = logging.getLogger(__name__)

EXCEL_EXTENSIONS = ('.xlsx', '.xlsm', '.xls')


class HubInputReader:
    """
    Reads the input files of energy hub runs.

    Relative paths are resolved against ``base_dir`` (the directory of the
    run configuration when created through ``from_config``).

    Example
    -------
    >>> reader = HubInputReader('/path/to/inputs')
    >>> params = reader.read_assumptions('assumptions.csv', year=2050)
    >>> profiles = reader.read_profiles('profiles_chile.csv')
    """

    def __init__(self, base_dir: str = '.'):
        self.base_dir = base_dir

    def resolve(self, path: str) -> str:
        if os.path.isabs(path):
            return path
        return os.path.normpath(os.path.join(self.base_dir, path))

    # =========================================================================
    # Data tables
    # =========================================================================

    def read_assumptions(self, path: str, year: int,
                         sheet: Optional[str] = None) -> ParameterTable:
        """
        Read a ``Tech, Comp, <year>...`` table into a ``ParameterTable``.

        Excel workbooks (``.xlsx``, ``.xlsm``, ``.xls``) are read from
        ``sheet``, or from their first sheet; any other path is read as CSV.
        """
        full_path = self.resolve(path)
        if full_path.lower().endswith(EXCEL_EXTENSIONS):
            table = pd.read_excel(full_path, sheet_name=sheet if sheet is not None else 0)
        else:
            table = pd.read_csv(full_path)
        logger.info(f"Read {len(table)} technology parameters from {full_path}")
        return ParameterTable(table, year)

    def read_profiles(self, path: str) -> HourlyProfiles:
        """
        Read hourly capacity factors.

        Column names are matched case-insensitively; an ``hour`` column, if
        present, is used to order the rows.

        Raises
        ------
        ProfileError
            If a profile column is missing.
        """
        full_path = self.resolve(path)
        data = pd.read_csv(full_path)
        data.columns = [str(c).strip().lower() for c in data.columns]
        if 'hour' in data.columns:
            data = data.sort_values('hour').set_index('hour')
        missing = [name for name in PROFILE_NAMES if name not in data.columns]
        if missing:
            raise ProfileError(f"{full_path} lacks profile columns {missing}")
        logger.info(f"Read {len(data)} hourly profile values from {full_path}")
        return HourlyProfiles(data[list(PROFILE_NAMES)].reset_index(drop=True))

    # =========================================================================
    # Run configuration
    # =========================================================================

    def read_config(self, path: str) -> Dict[str, Any]:
        """Load a YAML file into a dict (empty file gives an empty dict)."""
        full_path = self.resolve(path)
        with open(full_path, 'r') as f:
            config = yaml.safe_load(f)
        return config or {}

    def parse_config(self, config: Dict[str, Any]) -> RunConfig:
        """
        Turn a raw configuration mapping into a ``RunConfig``.

        Raises
        ------
        ValueError
            On missing sections, unknown settings, or unknown technology or
            component names in overrides.
        """
        if 'assumptions' not in config:
            raise ValueError("Run configuration needs an 'assumptions' entry")
        if not config.get('locations'):
            raise ValueError("Run configuration needs at least one location")

        settings = dict(config.get('settings') or {})
        if 'year' in config:
            settings['year'] = int(config['year'])

        output_dir = config.get('output_dir')
        return RunConfig(
            assumptions_path=self.resolve(config['assumptions']),
            assumptions_sheet=config.get('assumptions_sheet'),
            settings=HubSettings.from_dict(settings),
            locations=[self._parse_location(name, entry)
                       for name, entry in config['locations'].items()],
            output_dir=self.resolve(output_dir) if output_dir else None,
            solver=dict(config.get('solver') or {}),
        )

    def _parse_location(self, name: str, entry: Dict[str, Any]) -> LocationConfig:
        if 'profiles' not in entry:
            raise ValueError(f"Location '{name}' needs a 'profiles' entry")
        wave_potential = float(entry.get('wave_potential', 0.0))
        scenarios = {
            scen: SiteConditions(land_area=float((site or {}).get('land_area', 0.0)),
                                 wave_potential=wave_potential)
            for scen, site in (entry.get('scenarios') or {}).items()
        }
        return LocationConfig(
            name=name,
            profiles_path=self.resolve(entry['profiles']),
            demand=FuelDemand.from_dict(entry.get('demand') or {}),
            wave_potential=wave_potential,
            overrides=self._parse_overrides(entry.get('overrides') or []),
            scenarios=scenarios,
        )

    @staticmethod
    def _parse_overrides(entries) -> Dict[ParameterKey, float]:
        overrides = {}
        for entry in entries:
            key = (parse_technology(entry['technology']), parse_component(entry['component']))
            overrides[key] = float(entry['value'])
        return overrides

    @classmethod
    def from_config(cls, path: str, base_dir: Optional[str] = None) -> RunConfig:
        """Read and parse a run configuration file."""
        reader = cls(base_dir or os.path.dirname(os.path.abspath(path)))
        config = reader.read_config(os.path.abspath(path))
        run_config = reader.parse_config(config)
        logger.info(f"Loaded run configuration {path}: {len(run_config.locations)} location(s), "
                    f"{run_config.n_scenarios} scenario(s)")
        return run_config
