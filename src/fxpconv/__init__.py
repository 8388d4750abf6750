__version__ = "0.1.0"

from .errors import FixedPointError, DomainError, ConfigError, EncodingError
from .records import (
    FixedPointConfig,
    FixedPointValue,
    NoConversion,
    NO_CONVERSION,
    OverflowPolicy,
)
from .converter import convert, requantize, fixed_point_range, FixedPointRange
from .fp_coding import int_to_bits, bits_to_int, decompose

__all__ = [
    'convert',
    'requantize',
    'fixed_point_range',
    'FixedPointRange',
    'FixedPointConfig',
    'FixedPointValue',
    'NoConversion',
    'NO_CONVERSION',
    'OverflowPolicy',
    'FixedPointError',
    'DomainError',
    'ConfigError',
    'EncodingError',
    'int_to_bits',
    'bits_to_int',
    'decompose',
    '__version__',
]
