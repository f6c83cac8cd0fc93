"""
Exceptions raised by the signal engine.
"""


class SignalEngineError(Exception):
    """Base class for all engine errors."""
    pass


class ConfigurationError(SignalEngineError):
    """Invalid parameters — raised at setup, never mid-stream."""
    pass


class DataError(SignalEngineError):
    """A bar that cannot be fed into indicator state."""
    pass
