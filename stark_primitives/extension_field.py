"""Cubic extension GF(p^3) = GF(p)[x] / (x^3 - x - 1).

Elements are stored as ascending-order coefficients (a0, a1, a2) for
a0 + a1*x + a2*x^2. Multiplication, inversion and exponentiation go through
the galois field FF3; addition works coefficient-wise on the tuple.
"""

from typing import Iterable, List, Sequence, Tuple

import galois

from stark_primitives.config import GOLDILOCKS_PRIME
from stark_primitives.errors import InverseOfZeroError, NotInBaseFieldError
from stark_primitives.field import FF, FieldElement
from stark_primitives.traits import FieldArithmetic

EXTENSION_DEGREE = 3

# x^3 - x - 1, ascending order
IRREDUCIBLE_POLY_COEFFS: Tuple[int, ...] = (-1, -1, 0, 1)

# In galois, polynomial coefficients are [x^3, x^2, x^1, x^0]
# x^3 - x - 1 = x^3 + 0*x^2 + (p-1)*x + (p-1)
_irr_poly = galois.Poly([1, 0, GOLDILOCKS_PRIME - 1, GOLDILOCKS_PRIME - 1], field=FF)
FF3 = galois.GF(GOLDILOCKS_PRIME**3, irreducible_poly=_irr_poly)
"""Cubic extension GF(p^3) as a galois array type."""

_MAX_FF3_EXPONENT = 1 << 63


# --- Coefficient Order Conversion ---
# Galois uses descending order [a2, a1, a0], we use ascending [a0, a1, a2].


def ff3(coeffs: Sequence[int]) -> FF3:
    """Construct FF3 element from ascending-order coefficients [a0, a1, a2]."""
    return FF3.Vector(list(coeffs)[::-1])


def ff3_coeffs(elem: FF3) -> List[int]:
    """Extract ascending-order coefficients [a0, a1, a2] from FF3 element."""
    return [int(c) for c in elem.vector()[::-1]]


class ExtensionFieldElement(FieldArithmetic):
    """Element of GF(p^3) as a tuple of three FieldElement coefficients."""

    __slots__ = ("_coefficients",)

    def __init__(self, coefficients: Iterable = (0, 0, 0)) -> None:
        coeffs = tuple(
            c if isinstance(c, FieldElement) else FieldElement(c) for c in coefficients
        )
        if len(coeffs) > EXTENSION_DEGREE:
            raise ValueError(
                f"expected at most {EXTENSION_DEGREE} coefficients, got {len(coeffs)}"
            )
        self._coefficients = coeffs + (FieldElement.zero(),) * (
            EXTENSION_DEGREE - len(coeffs)
        )

    @property
    def coefficients(self) -> Tuple[FieldElement, FieldElement, FieldElement]:
        return self._coefficients

    @classmethod
    def zero(cls) -> "ExtensionFieldElement":
        return _EXT_ZERO

    @classmethod
    def one(cls) -> "ExtensionFieldElement":
        return _EXT_ONE

    # --- Base field conversions ---

    @classmethod
    def lift(cls, element) -> "ExtensionFieldElement":
        """Embed a base field element (or int) as the constant coefficient."""
        return cls((element,))

    def is_in_base_field(self) -> bool:
        return self._coefficients[1].is_zero() and self._coefficients[2].is_zero()

    def project_to_base_field(self) -> FieldElement:
        """Inverse of lift().

        Raises:
            NotInBaseFieldError: If a1 or a2 is nonzero
        """
        if not self.is_in_base_field():
            raise NotInBaseFieldError(f"{self!r} has nonzero non-constant coefficients")
        return self._coefficients[0]

    # --- Arithmetic ---

    def add(self, other: "ExtensionFieldElement") -> "ExtensionFieldElement":
        return ExtensionFieldElement(
            a + b for a, b in zip(self._coefficients, other._coefficients)
        )

    def sub(self, other: "ExtensionFieldElement") -> "ExtensionFieldElement":
        return ExtensionFieldElement(
            a - b for a, b in zip(self._coefficients, other._coefficients)
        )

    def neg(self) -> "ExtensionFieldElement":
        return ExtensionFieldElement(-a for a in self._coefficients)

    def mul(self, other: "ExtensionFieldElement") -> "ExtensionFieldElement":
        return ExtensionFieldElement.from_ff3(self.to_ff3() * other.to_ff3())

    def scalar_mul(self, scalar: FieldElement) -> "ExtensionFieldElement":
        return ExtensionFieldElement(a * scalar for a in self._coefficients)

    def inv(self) -> "ExtensionFieldElement":
        """Multiplicative inverse in FF3.

        Raises:
            InverseOfZeroError: If self is zero
        """
        if self.is_zero():
            raise InverseOfZeroError("zero has no multiplicative inverse in GF(p^3)")
        return ExtensionFieldElement.from_ff3(self.to_ff3() ** -1)

    def pow(self, exponent: int) -> "ExtensionFieldElement":
        """Exponent 0 gives one, including 0^0; negative exponents invert first."""
        if exponent < 0:
            return self.inv().pow(-exponent)
        if exponent >= _MAX_FF3_EXPONENT:
            # galois exponents are int64
            return super().pow(exponent)
        return ExtensionFieldElement.from_ff3(self.to_ff3() ** exponent)

    def is_zero(self) -> bool:
        return all(c.is_zero() for c in self._coefficients)

    def is_one(self) -> bool:
        return self.is_in_base_field() and self._coefficients[0].is_one()

    def _coerce(self, other):
        if isinstance(other, ExtensionFieldElement):
            return other
        if isinstance(other, (FieldElement, int)):
            return ExtensionFieldElement.lift(other)
        return NotImplemented

    # --- galois Bridge ---

    def to_ff3(self) -> FF3:
        return ff3(ext_coeffs(self))

    @classmethod
    def from_ff3(cls, elem: FF3) -> "ExtensionFieldElement":
        return cls(ff3_coeffs(elem))

    # --- Python protocol ---

    def __eq__(self, other) -> bool:
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._coefficients == other._coefficients

    def __hash__(self) -> int:
        # Consistent with FieldElement/int equality for base field members
        if self.is_in_base_field():
            return hash(self._coefficients[0])
        return hash(tuple(c.to_canonical_integer() for c in self._coefficients))

    def __repr__(self) -> str:
        coeffs = ", ".join(str(c) for c in self._coefficients)
        return f"ExtensionFieldElement(({coeffs}))"


_EXT_ZERO = ExtensionFieldElement((0, 0, 0))
_EXT_ONE = ExtensionFieldElement((1, 0, 0))


def lift(element) -> ExtensionFieldElement:
    return ExtensionFieldElement.lift(element)


def project_to_base_field(element: ExtensionFieldElement) -> FieldElement:
    return element.project_to_base_field()


def ext_coeffs(element: ExtensionFieldElement) -> List[int]:
    """Ascending-order coefficients [a0, a1, a2] as plain ints."""
    return [c.to_canonical_integer() for c in element.coefficients]


def from_coeffs(coeffs: Sequence[int]) -> ExtensionFieldElement:
    """Construct from ascending-order coefficients [a0, a1, a2]."""
    return ExtensionFieldElement(coeffs)
