"""
Value types shared by the converter: the format config, the overflow
policy, the output record and the tagged entry input.
"""

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .errors import ConfigError, DomainError
from .fp_coding import bits_to_int, bits_to_str


class OverflowPolicy(Enum):
    WRAP = "Wrap"
    SATURATE = "Saturate"

    @classmethod
    def parse(cls, token) -> "OverflowPolicy":
        """Accept a member or its name/value in any letter case."""
        if isinstance(token, cls):
            return token
        if isinstance(token, str):
            for member in cls:
                if token.lower() in (member.value.lower(), member.name.lower()):
                    return member
        raise ConfigError(
            f"Unsupported overflow policy {token!r}; expected one of "
            f"{[m.value for m in cls]}"
        )


def _check_length(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise DomainError(f"{name} must be an integer, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class FixedPointConfig:
    """Sign mode, word length and fraction length of a fixed-point format."""

    signed: bool
    word_length: int
    fraction_length: int

    def __post_init__(self):
        if self.signed not in (0, 1):
            raise DomainError(f"Sign mode must be 0/1 or a bool, got {self.signed!r}")
        wl = _check_length("Word length", self.word_length)
        fl = _check_length("Fraction length", self.fraction_length)
        if wl < 1:
            raise DomainError(f"Word length must be positive, got WL={wl}")
        if fl < 0 or fl > wl:
            raise DomainError(
                f"Fraction length must satisfy 0 <= FL <= WL, got WL={wl}, FL={fl}"
            )
        # Normalise numpy scalars and 0/1 flags.
        object.__setattr__(self, "signed", bool(self.signed))
        object.__setattr__(self, "word_length", wl)
        object.__setattr__(self, "fraction_length", fl)

    @property
    def integer_length(self) -> int:
        return self.word_length - self.fraction_length

    @property
    def sign_bit(self) -> int:
        return int(self.signed)

    def __str__(self):
        mode = "S" if self.signed else "U"
        return f"{mode}({self.integer_length},{self.fraction_length})"


@dataclass(frozen=True)
class FixedPointValue:
    """Result of one conversion.

    ``int``/``bin`` hold the two's-complement view of the quantized value.
    ``dec``/``frac`` are decoded from the magnitude bits, which are never
    sign-adjusted, so for negative inputs the two views differ.
    """

    signed: bool
    word_length: int
    fraction_length: int
    int: int
    bin: Tuple[int, ...]
    sgn: int
    dec: float
    frac: float
    fxp: float
    float: float
    max: float
    min: float
    dr_db: float
    res: float
    err: float
    of_flag: int

    @property
    def config(self) -> FixedPointConfig:
        return FixedPointConfig(self.signed, self.word_length, self.fraction_length)

    @property
    def bin_str(self) -> str:
        return bits_to_str(self.bin)

    def to_hex(self) -> str:
        hex_digits = (self.word_length + 3) // 4
        return f"0x{self.int:0{hex_digits}X}"

    def to_dict(self) -> dict:
        """Plain mapping keyed like the original struct fields."""
        return {
            "S": int(self.signed),
            "WL": self.word_length,
            "FL": self.fraction_length,
            "int": self.int,
            "bin": list(self.bin),
            "sgn": self.sgn,
            "dec": self.dec,
            "frac": self.frac,
            "fxp": self.fxp,
            "float": self.float,
            "max": self.max,
            "min": self.min,
            "DR_dB": self.dr_db,
            "res": self.res,
            "err": self.err,
            "of_flag": self.of_flag,
        }

    def __repr__(self):
        return f"<{self.fxp} [{self.int}] {self.config}>"


class NoConversion:
    """Re-quantization target matches the source format; nothing was produced."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "NO_CONVERSION"


NO_CONVERSION = NoConversion()


@dataclass(frozen=True)
class Scalar:
    value: float


@dataclass(frozen=True)
class PriorResult:
    """A previously produced record, reduced to what re-quantization needs.

    The sign mode and the format are tracked apart, since a record may carry
    ``S`` without ``WL``/``FL``. Every recoverable field is optional and
    tested explicitly.
    """

    config: Optional[FixedPointConfig]
    sign: Optional[bool] = None
    value: Optional[float] = None
    int_value: Optional[int] = None
    bits: Optional[Tuple[int, ...]] = None
    dec: Optional[float] = None
    frac: Optional[float] = None
    sgn: Optional[int] = None

    @classmethod
    def from_value(cls, record: FixedPointValue) -> "PriorResult":
        return cls(
            config=record.config,
            sign=record.signed,
            value=record.float,
            int_value=record.int,
            bits=record.bin,
            dec=record.dec,
            frac=record.frac,
            sgn=record.sgn,
        )

    @classmethod
    def from_mapping(cls, record) -> "PriorResult":
        sign = None
        if "S" in record:
            if record["S"] not in (0, 1):
                raise DomainError(f"Sign mode must be 0/1 or a bool, got {record['S']!r}")
            sign = bool(record["S"])
        config = None
        if all(key in record for key in ("S", "WL", "FL")):
            config = FixedPointConfig(record["S"], record["WL"], record["FL"])
        bits = record.get("bin")
        return cls(
            config=config,
            sign=sign,
            value=record.get("float"),
            int_value=record.get("int"),
            bits=tuple(int(b) for b in bits) if bits is not None else None,
            dec=record.get("dec"),
            frac=record.get("frac"),
            sgn=record.get("sgn"),
        )

    @property
    def is_recoverable(self) -> bool:
        return (
            self.value is not None
            or self.int_value is not None
            or self.bits is not None
            or (self.dec is not None and self.frac is not None)
        )

    def recover_float(self) -> float:
        """Return the most information-preserving float the record carries."""
        if self.value is not None:
            return float(self.value)

        has_word = self.int_value is not None or self.bits is not None
        if has_word and self.config is not None:
            wl = self.config.word_length
            if self.int_value is not None:
                word = int(self.int_value) % (1 << wl)
            else:
                word = bits_to_int(self.bits)
            if self.config.signed and word >= 1 << (wl - 1):
                word -= 1 << wl
            return word * 2.0 ** -self.config.fraction_length

        if self.dec is not None and self.frac is not None:
            sgn = -1 if self.sgn is not None and self.sgn < 0 else 1
            return sgn * (float(self.dec) + float(self.frac))

        raise ConfigError(
            "Record without 'float' or 'dec'/'frac' needs S/WL/FL to decode int|bin"
        )


EntryInput = Union[Scalar, PriorResult]


def classify_input(x) -> EntryInput:
    """Resolve the entry input to a tagged variant, once."""
    if isinstance(x, FixedPointValue):
        return PriorResult.from_value(x)
    if isinstance(x, dict) or hasattr(x, "keys"):
        return PriorResult.from_mapping(x)
    if isinstance(x, bool) or not isinstance(x, numbers.Real):
        raise DomainError(f"Input must be a real scalar or a fixed-point record, got {x!r}")
    value = float(x)
    if not math.isfinite(value):
        raise DomainError(f"Input must be finite, got {value}")
    return Scalar(value)
