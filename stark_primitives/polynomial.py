"""
Univariate polynomials over GF(p) or GF(p^3).

Polynomials are immutable and stored as ascending coefficient tuples with
trailing zeros stripped, so the zero polynomial has no coefficients and
degree -inf. Coefficients may be FieldElement or ExtensionFieldElement;
mixing both in one polynomial is allowed and arithmetic promotes to the
extension where needed.

Multiplication and interpolation switch between schoolbook / Lagrange and
NTT-based algorithms as governed by TransformConfig.
"""

import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from stark_primitives.batch_inverse import batch_inverse, batch_inverse_elements
from stark_primitives.config import DEFAULT_TRANSFORM_CONFIG, TransformConfig
from stark_primitives.errors import (
    DivisionByZeroPolynomialError,
    DuplicatePointError,
    InvalidDomainSizeError,
    MismatchedLengthsError,
)
from stark_primitives.extension_field import ExtensionFieldElement
from stark_primitives.field import (
    SHIFT,
    FieldElement,
    from_ff_array,
    is_power_of_two,
    primitive_root_of_unity,
    to_ff_array,
)
from stark_primitives.ntt import coset_intt, coset_ntt, intt, low_degree_extend, ntt
from stark_primitives.traits import FieldArithmetic

logger = logging.getLogger(__name__)

Element = Union[FieldElement, ExtensionFieldElement]

ZERO_POLYNOMIAL_DEGREE = -math.inf


def _as_element(value) -> Element:
    if isinstance(value, FieldArithmetic):
        return value
    return FieldElement(value)


def _next_power_of_two(n: int) -> int:
    return 1 << max(n - 1, 0).bit_length()


class Polynomial:
    """Immutable polynomial with ascending-order coefficients."""

    __slots__ = ("_coefficients",)

    def __init__(self, coefficients: Iterable = ()) -> None:
        coeffs = [_as_element(c) for c in coefficients]
        while coeffs and coeffs[-1].is_zero():
            coeffs.pop()
        self._coefficients: Tuple[Element, ...] = tuple(coeffs)

    # --- Constructors ---

    @classmethod
    def zero(cls) -> "Polynomial":
        return cls()

    @classmethod
    def one(cls) -> "Polynomial":
        return cls((FieldElement.one(),))

    @classmethod
    def x(cls) -> "Polynomial":
        return cls((FieldElement.zero(), FieldElement.one()))

    @classmethod
    def constant(cls, value) -> "Polynomial":
        return cls((value,))

    # --- Accessors ---

    @property
    def coefficients(self) -> Tuple[Element, ...]:
        return self._coefficients

    def degree(self) -> Union[int, float]:
        """Index of the highest nonzero coefficient; -inf for the zero polynomial."""
        if not self._coefficients:
            return ZERO_POLYNOMIAL_DEGREE
        return len(self._coefficients) - 1

    def leading_coefficient(self) -> Optional[Element]:
        if not self._coefficients:
            return None
        return self._coefficients[-1]

    def is_zero(self) -> bool:
        return not self._coefficients

    def is_one(self) -> bool:
        return len(self._coefficients) == 1 and self._coefficients[0].is_one()

    def is_x(self) -> bool:
        return (
            len(self._coefficients) == 2
            and self._coefficients[0].is_zero()
            and self._coefficients[1].is_one()
        )

    # --- Ring operations ---

    def add(self, other: "Polynomial") -> "Polynomial":
        a, b = self._coefficients, other._coefficients
        if len(a) < len(b):
            a, b = b, a
        result = list(a)
        for i, c in enumerate(b):
            result[i] = result[i] + c
        return Polynomial(result)

    def sub(self, other: "Polynomial") -> "Polynomial":
        return self.add(other.neg())

    def neg(self) -> "Polynomial":
        return Polynomial(-c for c in self._coefficients)

    def scalar_mul(self, scalar) -> "Polynomial":
        scalar = _as_element(scalar)
        return Polynomial(c * scalar for c in self._coefficients)

    def mul(self, other: "Polynomial", config: Optional[TransformConfig] = None) -> "Polynomial":
        """Product, schoolbook for short results and NTT above the threshold."""
        config = config or DEFAULT_TRANSFORM_CONFIG
        if self.is_zero() or other.is_zero():
            return Polynomial.zero()
        product_len = len(self._coefficients) + len(other._coefficients) - 1
        if product_len <= config.mul_ntt_threshold:
            return self.naive_mul(other)
        return self.fast_mul(other)

    def naive_mul(self, other: "Polynomial") -> "Polynomial":
        """Schoolbook multiplication, O(n*m)."""
        if self.is_zero() or other.is_zero():
            return Polynomial.zero()
        result: List[Element] = [FieldElement.zero()] * (
            len(self._coefficients) + len(other._coefficients) - 1
        )
        for i, a in enumerate(self._coefficients):
            if a.is_zero():
                continue
            for j, b in enumerate(other._coefficients):
                result[i + j] = result[i + j] + a * b
        return Polynomial(result)

    def fast_mul(self, other: "Polynomial") -> "Polynomial":
        """NTT multiplication: evaluate both on a large enough domain, multiply pointwise."""
        if self.is_zero() or other.is_zero():
            return Polynomial.zero()
        product_len = len(self._coefficients) + len(other._coefficients) - 1
        domain_size = _next_power_of_two(product_len)
        logger.debug(
            f"NTT multiply: degrees {self.degree()} x {other.degree()}, domain {domain_size}"
        )
        lhs = ntt(self._coefficients, domain_size)
        rhs = ntt(other._coefficients, domain_size)
        return Polynomial(intt([a * b for a, b in zip(lhs, rhs)]))

    def square(self) -> "Polynomial":
        return self.mul(self)

    def mod_pow(self, exponent: int) -> "Polynomial":
        """self^exponent by square-and-multiply; p^0 is one for every p."""
        if exponent < 0:
            raise ValueError(f"exponent must be non-negative, got {exponent}")
        result = Polynomial.one()
        base = self
        while exponent:
            if exponent & 1:
                result = result.mul(base)
            exponent >>= 1
            if exponent:
                base = base.square()
        return result

    def div_rem(self, divisor: "Polynomial") -> Tuple["Polynomial", "Polynomial"]:
        """
        Long division: self = quotient * divisor + remainder, deg(remainder) < deg(divisor).

        Raises:
            DivisionByZeroPolynomialError: If divisor is the zero polynomial
        """
        if divisor.is_zero():
            raise DivisionByZeroPolynomialError("polynomial division by zero")
        if self.degree() < divisor.degree():
            return Polynomial.zero(), self

        remainder = list(self._coefficients)
        d = divisor._coefficients
        d_deg = len(d) - 1
        lc_inv = d[-1].inv()

        quotient: List[Element] = [FieldElement.zero()] * (len(remainder) - d_deg)
        for i in range(len(remainder) - 1 - d_deg, -1, -1):
            q = remainder[i + d_deg] * lc_inv
            quotient[i] = q
            if q.is_zero():
                continue
            for j in range(d_deg + 1):
                remainder[i + j] = remainder[i + j] - q * d[j]

        return Polynomial(quotient), Polynomial(remainder[:d_deg])

    # --- Evaluation ---

    def evaluate(self, point) -> Element:
        """Horner evaluation."""
        point = _as_element(point)
        acc: Element = FieldElement.zero()
        for c in reversed(self._coefficients):
            acc = acc * point + c
        return acc

    def evaluate_on_domain(self, domain_size: int) -> List[Element]:
        """Evaluate at omega^0 .. omega^(domain_size - 1) with one NTT.

        Raises:
            InvalidDomainSizeError: If domain_size is invalid or below the coefficient count
        """
        return ntt(self._coefficients, domain_size)

    def coset_evaluate(self, offset, domain_size: int) -> List[Element]:
        """Evaluate at offset * omega^i for i < domain_size."""
        return coset_ntt(self._coefficients, offset, domain_size)

    # --- Transformations ---

    def scale(self, alpha) -> "Polynomial":
        """f(alpha * X): coefficient i is multiplied by alpha^i."""
        alpha = _as_element(alpha)
        acc: Element = FieldElement.one()
        result = []
        for c in self._coefficients:
            result.append(c * acc)
            acc = acc * alpha
        return Polynomial(result)

    def shift_coefficients(self, power: int) -> "Polynomial":
        """Multiply by X^power."""
        if power < 0:
            raise ValueError(f"power must be non-negative, got {power}")
        if self.is_zero():
            return self
        return Polynomial((FieldElement.zero(),) * power + self._coefficients)

    def lift(self) -> "Polynomial":
        """Same polynomial with every coefficient in GF(p^3)."""
        return Polynomial(
            c if isinstance(c, ExtensionFieldElement) else ExtensionFieldElement.lift(c)
            for c in self._coefficients
        )

    def fast_coset_divide(self, divisor: "Polynomial", offset=SHIFT) -> "Polynomial":
        """
        Exact division self / divisor by pointwise division on a coset.

        The coset offset * <omega> must avoid the roots of divisor, and divisor
        must divide self; otherwise the result is not the true quotient.

        Raises:
            DivisionByZeroPolynomialError: If divisor is the zero polynomial
            InverseOfZeroError: If divisor vanishes somewhere on the coset
        """
        if divisor.is_zero():
            raise DivisionByZeroPolynomialError("polynomial division by zero")
        if self.is_zero():
            return Polynomial.zero()
        if divisor.degree() > self.degree():
            raise ValueError(
                f"divisor degree {divisor.degree()} exceeds dividend degree {self.degree()}"
            )

        domain_size = _next_power_of_two(len(self._coefficients))
        lhs = coset_ntt(self._coefficients, offset, domain_size)
        rhs = coset_ntt(divisor._coefficients, offset, domain_size)

        if _all_base(lhs) and _all_base(rhs):
            quotient = to_ff_array(lhs) * batch_inverse(to_ff_array(rhs))
            quotient_evals: List[Element] = from_ff_array(quotient)
        else:
            quotient_evals = [a * b for a, b in zip(lhs, batch_inverse_elements(rhs))]

        return Polynomial.coset_interpolate(offset, quotient_evals)

    # --- Interpolation ---

    @classmethod
    def interpolate(
        cls,
        points: Sequence,
        values: Sequence,
        config: Optional[TransformConfig] = None,
    ) -> "Polynomial":
        """
        Unique polynomial of degree < n through n (point, value) pairs.

        When the points are exactly the n-th roots of unity (in any order) and
        the fast path is enabled, this is a single INTT.

        Raises:
            MismatchedLengthsError: If len(points) != len(values)
            DuplicatePointError: If two points coincide
        """
        config = config or DEFAULT_TRANSFORM_CONFIG
        if len(points) != len(values):
            raise MismatchedLengthsError(
                f"{len(points)} points but {len(values)} values"
            )
        if not points:
            return cls.zero()

        points = [_as_element(p) for p in points]
        values = [_as_element(v) for v in values]
        _check_distinct(points)

        if config.interpolation_ntt_fastpath:
            positions = _roots_of_unity_positions(points)
            if positions is not None:
                evaluations: List[Element] = [FieldElement.zero()] * len(points)
                for position, value in zip(positions, values):
                    evaluations[position] = value
                return cls(intt(evaluations))

        return cls.lagrange_interpolate(points, values)

    @classmethod
    def lagrange_interpolate(cls, points: Sequence, values: Sequence) -> "Polynomial":
        """
        O(n^2) Lagrange interpolation.

        With Z(X) = prod(X - x_j), the basis polynomial for x_i is
        Z(X) / (X - x_i) scaled by 1 / prod_{j != i}(x_i - x_j); all the
        denominators are inverted together.
        """
        if len(points) != len(values):
            raise MismatchedLengthsError(
                f"{len(points)} points but {len(values)} values"
            )
        if not points:
            return cls.zero()

        points = [_as_element(p) for p in points]
        values = [_as_element(v) for v in values]
        _check_distinct(points)

        n = len(points)
        zerofier = cls.zerofier(points)._coefficients

        numerators = []
        for x_i in points:
            # Synthetic division of Z by (X - x_i)
            quotient: List[Element] = [FieldElement.zero()] * n
            carry: Element = FieldElement.zero()
            for k in range(n, 0, -1):
                carry = zerofier[k] + carry * x_i
                quotient[k - 1] = carry
            numerators.append(quotient)

        denominators = [
            Polynomial(numerator).evaluate(x_i)
            for numerator, x_i in zip(numerators, points)
        ]
        weights = batch_inverse_elements(denominators)

        result: List[Element] = [FieldElement.zero()] * n
        for value, weight, numerator in zip(values, weights, numerators):
            factor = value * weight
            if factor.is_zero():
                continue
            for j in range(n):
                result[j] = result[j] + factor * numerator[j]
        return cls(result)

    @classmethod
    def coset_interpolate(cls, offset, values: Sequence) -> "Polynomial":
        """Inverse of coset_evaluate(): values are taken at offset * omega^i."""
        return cls(coset_intt(values, offset))

    @classmethod
    def zerofier(cls, domain: Sequence) -> "Polynomial":
        """Monic prod(X - d) over the domain; one for an empty domain."""
        coeffs: List[Element] = [FieldElement.one()]
        for d in domain:
            d = _as_element(d)
            shifted: List[Element] = [FieldElement.zero()] * (len(coeffs) + 1)
            for k, c in enumerate(coeffs):
                shifted[k + 1] = shifted[k + 1] + c
                shifted[k] = shifted[k] - d * c
            coeffs = shifted
        return cls(coeffs)

    # --- Divide and conquer ---

    @classmethod
    def fast_zerofier(
        cls, domain: Sequence, config: Optional[TransformConfig] = None
    ) -> "Polynomial":
        """Same result as zerofier(), built as a product tree of the two halves."""
        if not domain:
            return cls.one()
        if len(domain) == 1:
            return cls((-_as_element(domain[0]), FieldElement.one()))
        half = len(domain) // 2
        left = cls.fast_zerofier(domain[:half], config)
        right = cls.fast_zerofier(domain[half:], config)
        return left.mul(right, config)

    def fast_evaluate(
        self, domain: Sequence, config: Optional[TransformConfig] = None
    ) -> List[Element]:
        """
        Evaluate at every point of domain.

        The polynomial is reduced modulo the zerofier of each half, and each
        remainder is evaluated on its own half.
        """
        if not domain:
            return []
        if len(domain) == 1:
            return [self.evaluate(domain[0])]
        half = len(domain) // 2
        left_zerofier = Polynomial.fast_zerofier(domain[:half], config)
        right_zerofier = Polynomial.fast_zerofier(domain[half:], config)
        left = (self % left_zerofier).fast_evaluate(domain[:half], config)
        right = (self % right_zerofier).fast_evaluate(domain[half:], config)
        return left + right

    @classmethod
    def fast_interpolate(
        cls,
        points: Sequence,
        values: Sequence,
        config: Optional[TransformConfig] = None,
    ) -> "Polynomial":
        """
        Divide-and-conquer interpolation for arbitrary distinct points.

        With Z_L and Z_R the zerofiers of the two halves, the result is
        I_L * Z_R + I_R * Z_L, where I_L interpolates values / Z_R on the left
        half and I_R interpolates values / Z_L on the right half.

        Raises:
            MismatchedLengthsError: If len(points) != len(values)
            DuplicatePointError: If two points coincide
        """
        if len(points) != len(values):
            raise MismatchedLengthsError(
                f"{len(points)} points but {len(values)} values"
            )
        if not points:
            return cls.zero()

        points = [_as_element(p) for p in points]
        values = [_as_element(v) for v in values]
        _check_distinct(points)
        logger.debug(f"Divide-and-conquer interpolation through {len(points)} points")
        return cls._fast_interpolate(points, values, config)

    @classmethod
    def _fast_interpolate(
        cls,
        points: List[Element],
        values: List[Element],
        config: Optional[TransformConfig],
    ) -> "Polynomial":
        if len(points) == 1:
            return cls.constant(values[0])

        half = len(points) // 2
        left_zerofier = cls.fast_zerofier(points[:half], config)
        right_zerofier = cls.fast_zerofier(points[half:], config)

        # Nonzero because the points are distinct
        offsets = (
            right_zerofier.fast_evaluate(points[:half], config)
            + left_zerofier.fast_evaluate(points[half:], config)
        )
        targets = [v * w for v, w in zip(values, batch_inverse_elements(offsets))]

        left = cls._fast_interpolate(points[:half], targets[:half], config)
        right = cls._fast_interpolate(points[half:], targets[half:], config)
        return left.mul(right_zerofier, config) + right.mul(left_zerofier, config)

    # --- Collinearity ---

    @staticmethod
    def are_colinear(points: Sequence[Tuple]) -> bool:
        """True when at least three points with distinct x lie on one line."""
        if len(points) < 3:
            return False
        pts = [(_as_element(x), _as_element(y)) for x, y in points]
        xs = [x for x, _ in pts]
        if len(set(xs)) != len(xs):
            return False

        (x0, y0), (x1, y1) = pts[0], pts[1]
        slope = (y1 - y0) / (x1 - x0)
        intercept = y0 - slope * x0
        return all(slope * x + intercept == y for x, y in pts[2:])

    @staticmethod
    def get_colinear_y(p0: Tuple, p1: Tuple, x) -> Element:
        """y-coordinate at x on the line through p0 and p1.

        Raises:
            DuplicatePointError: If p0 and p1 share the x-coordinate
        """
        x0, y0 = _as_element(p0[0]), _as_element(p0[1])
        x1, y1 = _as_element(p1[0]), _as_element(p1[1])
        if x0 == x1:
            raise DuplicatePointError(f"line through two points with x = {x0}")
        slope = (y1 - y0) / (x1 - x0)
        return y0 + slope * (_as_element(x) - x0)

    # --- Python protocol ---

    def __add__(self, other):
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, other):
        if isinstance(other, Polynomial):
            return self.mul(other)
        if isinstance(other, (FieldArithmetic, int)):
            return self.scalar_mul(other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, (FieldArithmetic, int)):
            return self.scalar_mul(other)
        return NotImplemented

    def __neg__(self):
        return self.neg()

    def __pow__(self, exponent: int):
        return self.mod_pow(exponent)

    def __divmod__(self, other):
        return self.div_rem(other)

    def __floordiv__(self, other):
        return self.div_rem(other)[0]

    def __mod__(self, other):
        return self.div_rem(other)[1]

    def __call__(self, point) -> Element:
        return self.evaluate(point)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self._coefficients == other._coefficients

    def __hash__(self) -> int:
        return hash(self._coefficients)

    def __repr__(self) -> str:
        return f"Polynomial([{', '.join(str(c) for c in self._coefficients)}])"


# --- Helpers ---

def _all_base(values: Sequence) -> bool:
    return all(isinstance(v, FieldElement) for v in values)


def _check_distinct(points: Sequence[Element]) -> None:
    seen = set()
    for p in points:
        if p in seen:
            raise DuplicatePointError(f"interpolation point {p!r} appears twice")
        seen.add(p)


def _roots_of_unity_positions(points: Sequence[Element]) -> Optional[List[int]]:
    """If the (distinct) points are exactly the n-th roots of unity, map each to its exponent."""
    n = len(points)
    if not is_power_of_two(n):
        return None
    try:
        omega = primitive_root_of_unity(n)
    except InvalidDomainSizeError:
        return None

    exponent_of = {}
    acc = FieldElement.one()
    for i in range(n):
        exponent_of[acc] = i
        acc = acc * omega

    positions = []
    for p in points:
        i = exponent_of.get(p)
        if i is None:
            return None
        positions.append(i)
    return positions


# --- Coefficient / evaluation conversions ---

def to_coefficients(evaluations: Sequence) -> List[Element]:
    """Coefficients of the polynomial taking `evaluations` on the roots of unity."""
    return intt(evaluations)


def to_evaluations(coefficients: Sequence, domain_size: Optional[int] = None) -> List[Element]:
    """Evaluations on the domain_size-th roots of unity (defaults to len(coefficients))."""
    return ntt(coefficients, domain_size)


def extend_to_domain(
    evaluations: Sequence,
    extended_size: int,
    shift: FieldElement = SHIFT,
) -> List[Element]:
    """Low-degree extension onto the coset shift * <omega_extended>."""
    return low_degree_extend(evaluations, extended_size, shift)
