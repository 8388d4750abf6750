class FixedPointError(ValueError):
    """Base class for every failure reported by the converter."""


class DomainError(FixedPointError):
    """Input violates a precondition of the requested format.

    Raised for a negative value under an unsigned config, a malformed
    ``(S, WL, FL)`` triple, or a value that is not a finite real number.
    """


class ConfigError(FixedPointError):
    """Contradictory or incomplete conversion request."""


class EncodingError(FixedPointError, OverflowError):
    """A quantized integer does not fit the requested bit width."""
