import re
from dataclasses import dataclass
from functools import total_ordering

from errors import AmountOverflow, MalformedAmount

DECIMAL_PLACES = 4
SCALE = 10 ** DECIMAL_PLACES

# Range of a signed 64-bit integer
MIN_RAW = -(2 ** 63)
MAX_RAW = 2 ** 63 - 1

_AMOUNT_PATTERN = re.compile(r"^([+-]?)(\d*)(?:\.(\d*))?$", re.ASCII)


@total_ordering
@dataclass(frozen=True)
class Amount:
    """
    Fixed-point monetary value with 4 fractional digits.
    Stored as a signed integer scaled by 10,000, so "1.2345" is 12345.
    Arithmetic raises AmountOverflow instead of leaving the 64-bit range.
    """

    raw: int = 0

    def __post_init__(self):
        if not MIN_RAW <= self.raw <= MAX_RAW:
            raise AmountOverflow(f"Amount {self.raw} is outside the representable range")

    @classmethod
    def zero(cls) -> "Amount":
        return cls(0)

    @classmethod
    def parse(cls, text: str) -> "Amount":
        """
        Parse a decimal string such as "12", "-0.5" or "1.2345".

        Fractions shorter than 4 digits are zero-padded; longer ones, exponents
        and anything non-numeric raise MalformedAmount.
        """
        match = _AMOUNT_PATTERN.match(text.strip())
        if match is None:
            raise MalformedAmount(f"Not a decimal amount: {text!r}")

        sign, whole, fraction = match.groups()
        fraction = fraction or ""
        if not whole and not fraction:
            raise MalformedAmount(f"Not a decimal amount: {text!r}")
        if len(fraction) > DECIMAL_PLACES:
            raise MalformedAmount(f"Too many fractional digits (max {DECIMAL_PLACES}): {text!r}")

        raw = int(whole or "0") * SCALE + int(fraction.ljust(DECIMAL_PLACES, "0"))
        if sign == "-":
            raw = -raw

        try:
            return cls(raw)
        except AmountOverflow as e:
            raise MalformedAmount(f"Amount out of range: {text!r}") from e

    def add(self, other: "Amount") -> "Amount":
        return Amount(self.raw + other.raw)

    def subtract(self, other: "Amount") -> "Amount":
        return Amount(self.raw - other.raw)

    def __add__(self, other: "Amount") -> "Amount":
        return self.add(other)

    def __sub__(self, other: "Amount") -> "Amount":
        return self.subtract(other)

    def __neg__(self) -> "Amount":
        return Amount(-self.raw)

    def __lt__(self, other: "Amount") -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        return self.raw < other.raw

    def is_positive(self) -> bool:
        return self.raw > 0

    def __str__(self) -> str:
        whole, fraction = divmod(abs(self.raw), SCALE)
        sign = "-" if self.raw < 0 else ""
        return f"{sign}{whole}.{fraction:0{DECIMAL_PLACES}d}"

    def __repr__(self) -> str:
        return f"Amount({self})"
