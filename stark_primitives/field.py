"""Goldilocks prime field GF(p).

FieldElement is the scalar value type used throughout the package. Vectorised
code (the NTT engine, coset division) works on galois arrays of the same field,
FF, and converts at the boundary with to_ff_array() / from_ff_array().
"""

from typing import Iterable, List, Sequence

import galois

from stark_primitives.config import DEFAULT_TRANSFORM_CONFIG, GOLDILOCKS_PRIME
from stark_primitives.errors import InvalidDomainSizeError, InverseOfZeroError
from stark_primitives.traits import FieldArithmetic

# --- Field Construction ---

FF = galois.GF(GOLDILOCKS_PRIME)
"""Base field GF(p) as a galois array type."""

MULTIPLICATIVE_GENERATOR = 7
"""Generator of the full multiplicative group."""


# --- Scalar Element ---

class FieldElement(FieldArithmetic):
    """Element of GF(p), stored as its canonical representative in [0, p)."""

    __slots__ = ("_value",)

    def __init__(self, value: int = 0) -> None:
        self._value = int(value) % GOLDILOCKS_PRIME

    @classmethod
    def from_integer(cls, value: int) -> "FieldElement":
        """Reduce any Python integer (negative included) into the field."""
        return cls(value)

    def to_canonical_integer(self) -> int:
        return self._value

    @property
    def value(self) -> int:
        return self._value

    @classmethod
    def zero(cls) -> "FieldElement":
        return _ZERO

    @classmethod
    def one(cls) -> "FieldElement":
        return _ONE

    # --- Arithmetic ---

    def add(self, other: "FieldElement") -> "FieldElement":
        return FieldElement(self._value + other._value)

    def sub(self, other: "FieldElement") -> "FieldElement":
        return FieldElement(self._value - other._value)

    def mul(self, other: "FieldElement") -> "FieldElement":
        return FieldElement(self._value * other._value)

    def neg(self) -> "FieldElement":
        return FieldElement(-self._value)

    def inv(self) -> "FieldElement":
        """Inverse via Fermat's little theorem: a^(p-2)."""
        if self._value == 0:
            raise InverseOfZeroError("zero has no multiplicative inverse in GF(p)")
        return FieldElement(pow(self._value, GOLDILOCKS_PRIME - 2, GOLDILOCKS_PRIME))

    def pow(self, exponent: int) -> "FieldElement":
        if exponent < 0:
            return self.inv().pow(-exponent)
        # Python's pow(0, 0, p) is 1, matching the field convention
        return FieldElement(pow(self._value, exponent, GOLDILOCKS_PRIME))

    def is_zero(self) -> bool:
        return self._value == 0

    def is_one(self) -> bool:
        return self._value == 1

    def _coerce(self, other):
        if isinstance(other, FieldElement):
            return other
        if isinstance(other, int):
            return FieldElement(other)
        return NotImplemented

    # --- Python protocol ---

    def __eq__(self, other) -> bool:
        if isinstance(other, FieldElement):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"FieldElement({self._value})"

    def __str__(self) -> str:
        return str(self._value)


_ZERO = FieldElement(0)
_ONE = FieldElement(1)

# Domain shift for coset LDE
SHIFT = FieldElement(MULTIPLICATIVE_GENERATOR)
SHIFT_INV = SHIFT.inv()


# --- galois Bridge ---

def to_ff_array(values: Iterable) -> "FF":
    """Convert FieldElements (or ints) to a 1-D FF array."""
    return FF([int(v) % GOLDILOCKS_PRIME for v in values])


def from_ff_array(arr) -> List[FieldElement]:
    """Convert a 1-D FF array back to FieldElements."""
    return [FieldElement(int(x)) for x in arr]


def as_field_elements(values: Iterable) -> List[FieldElement]:
    """Accept FieldElements or ints, return FieldElements."""
    return [v if isinstance(v, FieldElement) else FieldElement(v) for v in values]


# --- Roots of Unity ---

# Precomputed roots of unity: W[n] is a primitive 2^n-th root of unity
W: Sequence[int] = (
    1,
    18446744069414584320,
    281474976710656,
    16777216,
    4096,
    64,
    8,
    2198989700608,
    4404853092538523347,
    6434636298004421797,
    4255134452441852017,
    9113133275150391358,
    4355325209153869931,
    4308460244895131701,
    7126024226993609386,
    1873558160482552414,
    8167150655112846419,
    5718075921287398682,
    3411401055030829696,
    8982441859486529725,
    1971462654193939361,
    6553637399136210105,
    8124823329697072476,
    5936499541590631774,
    2709866199236980323,
    8877499657461974390,
    3757607247483852735,
    4969973714567017225,
    2147253751702802259,
    2530564950562219707,
    1905180297017055339,
    3524815499551269279,
    7277203076849721926,
)

# Precomputed inverses: W_INV[n] = W[n]^(-1) mod p
W_INV: Sequence[int] = (
    1,
    18446744069414584320,
    18446462594437873665,
    18446742969902956801,
    18442240469788262401,
    18158513693329981441,
    16140901060737761281,
    274873712576,
    9171943329124577373,
    5464760906092500108,
    4088309022520035137,
    6141391951880571024,
    386651765402340522,
    11575992183625933494,
    2841727033376697931,
    8892493137794983311,
    9071788333329385449,
    15139302138664925958,
    14996013474702747840,
    5708508531096855759,
    6451340039662992847,
    5102364342718059185,
    10420286214021487819,
    13945510089405579673,
    17538441494603169704,
    16784649996768716373,
    8974194941257008806,
    16194875529212099076,
    5506647088734794298,
    7731871677141058814,
    16558868196663692994,
    9896756522253134970,
    1644488454024429189,
)


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def log2_domain(domain_size: int) -> int:
    """log2 of a valid transform domain size.

    Raises:
        InvalidDomainSizeError: If domain_size is not a power of two in [1, 2^32]
    """
    if not isinstance(domain_size, int) or not is_power_of_two(domain_size):
        raise InvalidDomainSizeError(
            f"domain size must be a power of two, got {domain_size}"
        )
    n_bits = domain_size.bit_length() - 1
    if n_bits > DEFAULT_TRANSFORM_CONFIG.two_adicity:
        raise InvalidDomainSizeError(
            f"domain size 2^{n_bits} does not divide p - 1 "
            f"(two-adicity is {DEFAULT_TRANSFORM_CONFIG.two_adicity})"
        )
    return n_bits


def get_omega(n_bits: int) -> int:
    """Return primitive 2^n_bits-th root of unity."""
    return W[n_bits]


def get_omega_inv(n_bits: int) -> int:
    """Return inverse of primitive 2^n_bits-th root of unity."""
    return W_INV[n_bits]


def primitive_root_of_unity(domain_size: int) -> FieldElement:
    """Primitive root of unity of order domain_size."""
    return FieldElement(W[log2_domain(domain_size)])
