# energyhub/output/__init__.py

from .compiler import ResultCompiler
from .writer import OutputWriter

__all__ = ['ResultCompiler', 'OutputWriter']
