# energyhub/solver/__init__.py

from .adapter import LinprogSolver, SolverResult, ModelMatrices, model_matrices

__all__ = ['LinprogSolver', 'SolverResult', 'ModelMatrices', 'model_matrices']
