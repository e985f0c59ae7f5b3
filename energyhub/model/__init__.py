# energyhub/model/__init__.py

from .builder import EnergyHubModelBuilder, HubModel

__all__ = ['EnergyHubModelBuilder', 'HubModel']
