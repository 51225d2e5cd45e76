"""
Exception types for binding parsing and workload handling.

The injection engine itself never raises; these cover the layers around it.
"""


class BindingSpecError(ValueError):
    """Raised when a KafkaBinding spec has the wrong JSON shape."""
    pass


class UnsupportedWorkloadError(ValueError):
    """Raised when an object carries no pod template the engine can bind."""
    pass


class SubjectResolutionError(LookupError):
    """Raised when a binding subject reference is malformed or of an unknown kind."""
    pass
