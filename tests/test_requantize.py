import logging

import pytest

from fxpconv import (
    NO_CONVERSION,
    ConfigError,
    FixedPointConfig,
    FixedPointValue,
    NoConversion,
    convert,
    requantize,
)


X_REF = 5.65236589


def test_same_format_is_a_no_op():

    r = convert(X_REF, True, 12, 8)

    out = convert(r, True, 12, 8)
    assert out is NO_CONVERSION
    assert isinstance(out, NoConversion)
    assert not out


def test_no_op_is_logged(caplog):

    r = convert(X_REF, True, 12, 8)

    with caplog.at_level(logging.INFO, logger='fxpconv.converter'):
        requantize(r, True, 12, 8)

    assert 'No conversion is required' in caplog.text


def test_shrink_word_length():

    r = convert(X_REF, True, 12, 8)

    out = convert(r, True, 10, 6)
    assert isinstance(out, FixedPointValue)
    assert out.fxp == 5.65625
    assert out.int == 362
    assert out.config == FixedPointConfig(True, 10, 6)


def test_requantize_uses_original_float():

    # 5.65236589 on 12/8 gives 1447; going through fxp=5.65625 would not
    coarse = convert(X_REF, True, 10, 6)

    fine = convert(coarse, True, 12, 8)
    assert fine.int == 1447


def test_sign_mismatch():

    r = convert(X_REF, True, 12, 8)

    with pytest.raises(ConfigError, match='Incorrect sign assignment'):
        convert(r, False, 12, 8)


def test_sign_is_inherited_when_omitted():

    r = convert(-1.25, True, 12, 8)

    out = requantize(r, None, 8, 4)
    assert out.signed
    assert out.fxp == -1.25


def test_mapping_round_trip():

    r = convert(X_REF, False, 10, 6)

    assert convert(r.to_dict(), False, 10, 6) is NO_CONVERSION
    assert convert(r.to_dict(), False, 12, 8).int == 1447


def test_mapping_missing_recoverable_fields():

    record = {'S': 1, 'WL': 12, 'FL': 8, 'max': 7.99}

    with pytest.raises(ConfigError, match='missing param'):
        convert(record, True, 10, 6)


def test_mapping_without_float_uses_int():

    record = {'S': 1, 'WL': 8, 'FL': 4, 'int': 216}

    assert convert(record, True, 10, 6).fxp == -2.5


def test_mapping_without_float_uses_bin():

    record = {'S': 1, 'WL': 8, 'FL': 4, 'bin': [1, 1, 0, 1, 1, 0, 0, 0]}

    assert convert(record, True, 10, 6).fxp == -2.5


def test_mapping_without_float_uses_dec_frac():

    record = {'S': 1, 'WL': 8, 'FL': 4, 'sgn': -1, 'dec': 2.0, 'frac': 0.5}

    assert convert(record, True, 10, 6).fxp == -2.5


def test_mapping_without_format_needs_float():

    assert convert({'float': 1.5}, False, 8, 4).fxp == 1.5

    with pytest.raises(ConfigError, match='S/WL/FL'):
        convert({'int': 24}, False, 8, 4)


def test_requantize_rejects_scalars():

    with pytest.raises(ConfigError, match='Expected a fixed-point record'):
        requantize(1.5, True, 8, 4)


def test_sign_mismatch_without_format():

    with pytest.raises(ConfigError, match='Incorrect sign assignment'):
        convert({'S': 1, 'float': 1.5}, False, 8, 4)


def test_sign_inherited_from_mapping_without_format():

    out = convert({'S': 1, 'float': -1.5}, None, 8, 4)

    assert out.signed
    assert out.fxp == -1.5


def test_missing_fields_checked_before_no_op():

    # same format, but nothing to recover a value from
    with pytest.raises(ConfigError, match='missing param'):
        convert({'S': 1, 'WL': 12, 'FL': 8}, True, 12, 8)


def test_dec_frac_without_format():

    record = {'sgn': -1, 'dec': 2.0, 'frac': 0.5}

    assert convert(record, True, 8, 4).fxp == -2.5
