# energyhub/input/__init__.py

from .reader import HubInputReader
from .structures import LocationConfig, RunConfig

__all__ = ['HubInputReader', 'LocationConfig', 'RunConfig']
