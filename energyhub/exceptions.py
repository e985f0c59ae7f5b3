# energyhub/exceptions.py

"""
Error taxonomy of the energy hub model.

Parameter and profile errors are raised while the model is assembled, before
any solve is attempted. Solver errors are raised by the solver adapter and
carry the backend status code and message.
"""

from typing import Optional


class EnergyHubError(Exception):
    """Base class for all energy hub errors."""
    pass


# ------------------------------------------------------------------
# Input data
# ------------------------------------------------------------------

class ParameterError(EnergyHubError):
    """Raised when the technology assumptions table is unusable."""
    pass


class ParameterNotFoundError(ParameterError, KeyError):
    """No row of the assumptions table matches a (technology, component) key."""

    def __str__(self):
        return Exception.__str__(self)


class AmbiguousParameterError(ParameterError):
    """More than one row of the assumptions table matches a key."""
    pass


class InvalidParameterError(ParameterError, ValueError):
    """A parameter value is outside its physical domain (e.g. lifetime <= 0)."""
    pass


class ProfileError(EnergyHubError, ValueError):
    """Raised when an hourly profile is missing or malformed."""
    pass


class ProfileLengthError(ProfileError):
    """An hourly profile does not have exactly one value per horizon hour."""
    pass


# ------------------------------------------------------------------
# Solver
# ------------------------------------------------------------------

class SolverError(EnergyHubError):
    """
    Base class for solver failures.

    Attributes
    ----------
    status : int or None
        Backend status code.
    message : str
        Backend diagnostic.
    """

    status_name = 'error'

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class InfeasibleModelError(SolverError):
    """The solver proved that no assignment satisfies all constraints."""
    status_name = 'infeasible'


class UnboundedModelError(SolverError):
    """The objective can be decreased without limit."""
    status_name = 'unbounded'


class SolverNumericalError(SolverError):
    """The solver aborted, hit a limit or failed to converge."""
    status_name = 'numerical'
