import pytest

from fxpconv import EncodingError, bits_to_int, decompose, int_to_bits
from fxpconv.fp_coding import bits_to_str


def test_msb_first_encoding():

    assert int_to_bits(362, 10) == (0, 1, 0, 1, 1, 0, 1, 0, 1, 0)
    assert int_to_bits(0, 4) == (0, 0, 0, 0)
    assert int_to_bits(15, 4) == (1, 1, 1, 1)


def test_wide_words():

    value = (1 << 70) + 5
    bits = int_to_bits(value, 72)

    assert len(bits) == 72
    assert bits_to_int(bits) == value


def test_twos_complement_decoding():

    assert bits_to_int((1, 1, 0, 1, 1, 0, 0, 0)) == 216
    assert bits_to_int((1, 1, 0, 1, 1, 0, 0, 0), signed=True) == -40
    assert bits_to_int((0, 1, 1, 1), signed=True) == 7
    assert bits_to_int((1, 0, 0, 0), signed=True) == -8


@pytest.mark.parametrize('value, width', [(16, 4), (-1, 8), (1 << 10, 10)])
def test_value_does_not_fit(value, width):

    with pytest.raises(EncodingError, match=f'{width}-bit'):
        int_to_bits(value, width)


def test_encoding_error_is_an_overflow():

    with pytest.raises(OverflowError):
        int_to_bits(256, 8)


def test_rejects_non_bits():

    with pytest.raises(EncodingError, match='Not a bit sequence'):
        bits_to_int((0, 2, 1))


def test_decompose():

    assert decompose(int_to_bits(362, 10), 6) == (5.0, 0.65625)
    assert decompose(int_to_bits(1447, 12), 8) == (5.0, 0.65234375)
    # all fractional / all integer
    assert decompose((1, 0, 1, 1), 4) == (0.0, 0.6875)
    assert decompose((1, 0, 1, 1), 0) == (11.0, 0.0)


def test_bits_to_str():

    assert bits_to_str((0, 1, 1, 0)) == '0110'
