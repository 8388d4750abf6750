import logging
import math
from dataclasses import dataclass

import numpy as np

from .errors import ConfigError, DomainError
from .fp_coding import decompose, int_to_bits
from .records import (
    NO_CONVERSION,
    FixedPointConfig,
    FixedPointValue,
    OverflowPolicy,
    PriorResult,
    classify_input,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FixedPointRange:
    """Bounds and resolution implied by a :class:`FixedPointConfig`."""

    resolution: float
    minimum: float
    maximum: float
    dr_db: float


def fixed_point_range(config: FixedPointConfig) -> FixedPointRange:
    """
    Signed formats span ``[-2**(IL-1), 2**(IL-1) - res]``, unsigned ones
    ``[0, 2**IL - res]``, with ``res = 2**-FL``.

    ``dr_db`` is ``20*log10(max - 1)``. It is ``-inf`` when ``max == 1``
    and ``nan`` when ``max < 1``.
    """
    il = config.integer_length
    resolution = 2.0 ** -config.fraction_length
    exponent = il - config.sign_bit

    maximum = 2.0 ** exponent - resolution
    minimum = -(2.0 ** exponent) if config.signed else 0.0

    with np.errstate(divide="ignore", invalid="ignore"):
        dr_db = float(20 * np.log10(maximum - 1))

    return FixedPointRange(resolution, minimum, maximum, dr_db)


def _round_half_up(value: float) -> int:
    # Operands are non-negative magnitudes, so half-up is half-away-from-zero.
    whole = math.floor(value)
    if value - whole >= 0.5:
        whole += 1
    return int(whole)


def _signed_word(x: float, config: FixedPointConfig) -> int:
    """Signed integer the quantizer's magnitude rounding gives for ``x``."""
    word = _round_half_up(abs(x) * 2 ** config.fraction_length)
    return -word if x < 0 else word


def apply_overflow(x: float, config: FixedPointConfig, rng: FixedPointRange,
                   policy: OverflowPolicy) -> tuple:
    """Map ``x`` into ``[min, max]`` according to ``policy``.

    Returns
    -------
    tuple[float, int]
        The possibly adjusted value and the overflow flag (0 or 1).
    """
    if rng.minimum <= x <= rng.maximum:
        return x, 0

    if policy is OverflowPolicy.SATURATE:
        adjusted = rng.maximum if x > rng.maximum else rng.minimum
    else:
        # Wrap the quantized word, then move x by the same number of periods.
        span = 1 << config.word_length
        lowest_word = round(rng.minimum * 2 ** config.fraction_length)
        word = _signed_word(x, config)
        wrapped = (word - lowest_word) % span + lowest_word
        adjusted = x - (word - wrapped) // span * 2.0 ** config.integer_length
        # A tie can round across the boundary after the shift; pin it to the word.
        if _signed_word(adjusted, config) != wrapped:
            adjusted = wrapped * 2.0 ** -config.fraction_length

    logger.info(
        "Overflow (%s) for %s: %r outside [%r, %r], using %r",
        policy.value, config, x, rng.minimum, rng.maximum, adjusted,
    )
    return adjusted, 1


def quantize(x: float, config: FixedPointConfig) -> tuple:
    """Split ``x`` into sign and magnitude and round both integer views.

    Returns
    -------
    tuple[int, float, int, int]
        ``(sgn, magnitude, x_int, x_int_fxp)`` where ``x_int`` is the rounded
        magnitude and ``x_int_fxp`` its two's-complement word.
    """
    scale = 2 ** config.fraction_length
    if config.signed and x < 0:
        sgn = -1
    else:
        sgn = 1
    magnitude = abs(x)

    x_int = _round_half_up(magnitude * scale)
    if sgn < 0:
        x_int_fxp = _round_half_up((2.0 ** config.integer_length - magnitude) * scale)
        # A negative value that rounds to zero yields 2**WL; its word is 0.
        x_int_fxp %= 1 << config.word_length
    else:
        x_int_fxp = x_int
    return sgn, magnitude, x_int, x_int_fxp


def _convert_scalar(x: float, config: FixedPointConfig,
                    policy: OverflowPolicy) -> FixedPointValue:
    rng = fixed_point_range(config)
    if not config.signed and x < 0:
        raise DomainError(f"Negative number {x!r} for unsigned data type {config}")

    x, of_flag = apply_overflow(x, config, rng, policy)
    sgn, magnitude, x_int, x_int_fxp = quantize(x, config)

    bits = int_to_bits(x_int_fxp, config.word_length)
    magnitude_bits = int_to_bits(x_int, config.word_length)
    dec, frac = decompose(magnitude_bits, config.fraction_length)
    x_fix = dec + frac

    return FixedPointValue(
        signed=config.signed,
        word_length=config.word_length,
        fraction_length=config.fraction_length,
        int=x_int_fxp,
        bin=bits,
        sgn=sgn,
        dec=dec,
        frac=frac,
        fxp=sgn * x_fix,
        float=sgn * magnitude,
        max=rng.maximum,
        min=rng.minimum,
        dr_db=rng.dr_db,
        res=rng.resolution,
        err=abs(magnitude - x_fix),
        of_flag=of_flag,
    )


def requantize(record, signed, word_length: int, fraction_length: int,
               overflow="Wrap"):
    """Cast a previously produced record to another fixed-point format.

    Parameters
    ----------
    record : FixedPointValue, mapping or PriorResult
        Source record. Mappings use the keys of :meth:`FixedPointValue.to_dict`.
    signed : bool or None
        Target sign mode. ``None`` keeps the record's sign mode.
    word_length, fraction_length : int
        Target format.
    overflow : OverflowPolicy or str, default ``"Wrap"``

    Returns
    -------
    FixedPointValue or NoConversion
        ``NO_CONVERSION`` when the record already has the target format.
    """
    prior = record if isinstance(record, PriorResult) else classify_input(record)
    if not isinstance(prior, PriorResult):
        raise ConfigError(f"Expected a fixed-point record, got {record!r}")
    policy = OverflowPolicy.parse(overflow)

    if not prior.is_recoverable:
        raise ConfigError("Input record is missing param(s) float|int|bin|dec/frac")

    if signed is None:
        if prior.sign is None:
            raise ConfigError("Sign mode not given and the record carries no 'S'")
        signed = prior.sign
    elif prior.sign is not None and bool(signed) != prior.sign:
        raise ConfigError(
            f"Incorrect sign assignment: record has S={int(prior.sign)}, "
            f"requested S={int(bool(signed))}"
        )
    target = FixedPointConfig(signed, word_length, fraction_length)

    source = prior.config
    if source == target:
        logger.info("No conversion is required, both in & out are %s", target)
        return NO_CONVERSION

    value = prior.recover_float()
    logger.debug("Re-quantizing %r from %s to %s", value, source, target)
    return _convert_scalar(value, target, policy)


def convert(x, signed, word_length: int, fraction_length: int, overflow="Wrap"):
    """Convert a real scalar (or a prior record) to fixed point.

    Parameters
    ----------
    x : float or FixedPointValue or mapping
        Value to convert. Records are re-quantized via :func:`requantize`.
    signed : bool
        ``True`` for two's-complement signed, ``False`` for unsigned.
    word_length : int
        Total number of bits.
    fraction_length : int
        Bits right of the binary point, ``0 <= fraction_length <= word_length``.
    overflow : OverflowPolicy or str, default ``"Wrap"``
        ``"Wrap"`` or ``"Saturate"``.

    Returns
    -------
    FixedPointValue or NoConversion

    Raises
    ------
    DomainError, ConfigError, EncodingError
    """
    entry = classify_input(x)
    if isinstance(entry, PriorResult):
        return requantize(entry, signed, word_length, fraction_length, overflow)

    policy = OverflowPolicy.parse(overflow)
    config = FixedPointConfig(signed, word_length, fraction_length)
    logger.debug("Converting %r to %s (%s)", entry.value, config, policy.value)
    return _convert_scalar(entry.value, config, policy)
