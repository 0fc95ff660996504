"""
Error taxonomy for the activation network.

Service failures always reach the caller. Persistence corruption is
recovered by load_store; invalid input is rejected before any service call.
"""


class ActivationNetworkError(Exception):
    """Base class for all activation network errors."""


class ServiceFailure(ActivationNetworkError):
    """Embedding or completion request failed or returned an unusable result."""


class PersistenceCorruption(ActivationNetworkError):
    """A network document could not be parsed, validated or produced."""


class InvalidInput(ActivationNetworkError, ValueError):
    """Text passed to learn/think was missing, empty or not a string."""
