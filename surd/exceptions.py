"""Exception types raised by SURD."""


class SURDError(ValueError):
    """Base class for input errors detected before discovery starts."""


class InvalidInputError(SURDError):
    """Input matrix is absent, empty, non-numeric or not finite."""


class InsufficientSamplesError(SURDError):
    """Fewer than two observations: regression is not possible."""
