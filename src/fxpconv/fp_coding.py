import numpy as np

from .errors import EncodingError


def int_to_bits(value: int, total_bits: int) -> tuple:
    """Encode a non-negative integer as a fixed-width, MSB-first bit tuple.

    Parameters
    ----------
    value : int
        Unsigned view of the integer to encode. Negative two's-complement
        values must already be folded into ``[0, 2**total_bits)``.
    total_bits : int
        Width of the resulting bit sequence.

    Returns
    -------
    tuple[int, ...]
        ``total_bits`` entries of 0/1, most-significant bit first.

    Raises
    ------
    EncodingError
        If ``value`` is negative or needs more than ``total_bits`` bits.
    """

    value = int(value)
    if value < 0 or value >= (1 << total_bits):
        raise EncodingError(
            f"Value {value} out of range for {total_bits}-bit unsigned encoding "
            f"(expected 0 <= value < {1 << total_bits})"
        )

    pattern = np.binary_repr(value, width=total_bits)
    return tuple(int(b) for b in pattern)


def bits_to_int(bits, signed: bool = False) -> int:
    """Decode an MSB-first bit sequence back into an integer.

    Parameters
    ----------
    bits : sequence of int
        Bits as produced by :func:`int_to_bits`.
    signed : bool, default ``False``
        Re-interpret the pattern as two's complement when ``True``.
    """

    arr = np.asarray(bits, dtype=np.int64)
    if arr.ndim != 1 or np.any((arr != 0) & (arr != 1)):
        raise EncodingError(f"Not a bit sequence: {list(bits)!r}")

    total_bits = arr.size
    value = 0
    for b in arr.tolist():
        value = (value << 1) | b

    # Re-interpret the unsigned pattern as signed two's complement.
    if signed and total_bits and arr[0] == 1:
        value -= 1 << total_bits
    return value


def decompose(bits, fractional_bits: int) -> tuple:
    """Split a magnitude bit pattern into its decimal and fractional parts.

    The low ``fractional_bits`` bits carry weights ``2**-1 .. 2**-FL``; the
    remaining high bits carry ``2**(IL-1) .. 2**0``.

    Returns
    -------
    tuple[float, float]
        ``(dec, frac)``.
    """

    arr = np.asarray(bits, dtype=np.float64)
    integer_bits = arr.size - fractional_bits

    frac_weights = 2.0 ** -np.arange(1, fractional_bits + 1)
    dec_weights = 2.0 ** np.arange(integer_bits - 1, -1, -1)

    frac = float(np.sum(arr[integer_bits:] * frac_weights))
    dec = float(np.sum(arr[:integer_bits] * dec_weights))
    return dec, frac


def bits_to_str(bits) -> str:
    return "".join(str(int(b)) for b in bits)


if __name__ == "__main__":
    # Basic sanity check for the bit codec.
    for width, value in [(10, 362), (12, 1447), (8, 0), (8, 255)]:
        encoded = int_to_bits(value, width)
        assert bits_to_int(encoded) == value, (width, value, encoded)

    dec, frac = decompose(int_to_bits(362, 10), 6)
    assert (dec, frac) == (5.0, 0.65625), (dec, frac)

    print("[fp_coding] Self-test passed for MSB-first bit encoding/decoding.")
