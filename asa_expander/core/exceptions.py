"""
Errors raised while expanding object references.
"""
from typing import Optional, Sequence


class ConfigExpansionError(ValueError):
    """Base class for failures while resolving objects in a configuration."""


class UnknownObjectError(ConfigExpansionError):
    """A command references an object or object-group that was never defined."""

    def __init__(self, name: str, line: Optional[str] = None):
        self.name = name
        self.line = line
        message = f"Reference to undefined object '{name}'"
        if line:
            message += f" in: {line.strip()}"
        super().__init__(message)


class ObjectCycleError(ConfigExpansionError):
    """Object-groups reference each other in a loop."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = list(cycle)
        super().__init__(f"Cyclic object-group reference: {' -> '.join(self.cycle)}")


class ExpansionDepthError(ConfigExpansionError):
    """Expansion of a single access-list entry recursed too deeply."""

    def __init__(self, depth: int, line: str):
        self.depth = depth
        self.line = line
        super().__init__(f"Expansion exceeded maximum depth {depth} for: {line.strip()}")
