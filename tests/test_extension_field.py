"""Tests for the cubic extension field GF(p^3) = GF(p)[x] / (x^3 - x - 1)."""

import galois
import pytest

from stark_primitives.errors import InverseOfZeroError, NotInBaseFieldError
from stark_primitives.extension_field import (
    IRREDUCIBLE_POLY_COEFFS,
    FF3,
    ExtensionFieldElement,
    ext_coeffs,
    ff3,
    ff3_coeffs,
    from_coeffs,
    lift,
    project_to_base_field,
)
from stark_primitives.field import FF, GOLDILOCKS_PRIME, FieldElement

P = GOLDILOCKS_PRIME

MODULUS = galois.Poly([c % P for c in IRREDUCIBLE_POLY_COEFFS], field=FF, order="asc")


def _random_ext(rng) -> ExtensionFieldElement:
    return ExtensionFieldElement(rng.randrange(P) for _ in range(3))


def _as_poly(e: ExtensionFieldElement) -> galois.Poly:
    return galois.Poly(ext_coeffs(e), field=FF, order="asc")


def _from_poly(poly: galois.Poly) -> ExtensionFieldElement:
    return ExtensionFieldElement(int(c) for c in poly.coeffs[::-1])


class TestConstruction:
    """Construction, padding and basis order."""

    def test_short_input_is_padded(self) -> None:
        """Missing high coefficients are zero."""
        e = ExtensionFieldElement((5,))
        assert ext_coeffs(e) == [5, 0, 0]

    def test_too_many_coefficients(self) -> None:
        """More than three coefficients is rejected."""
        with pytest.raises(ValueError):
            ExtensionFieldElement((1, 2, 3, 4))

    def test_from_coeffs_roundtrip(self) -> None:
        """from_coeffs and ext_coeffs are inverses."""
        assert ext_coeffs(from_coeffs([1, 2, 3])) == [1, 2, 3]

    def test_ff3_coefficient_order(self) -> None:
        """ff3 takes ascending coefficients; galois vectors are descending."""
        elem = ff3([1, 2, 3])
        assert [int(c) for c in elem.vector()] == [3, 2, 1]
        assert ff3_coeffs(elem) == [1, 2, 3]

    def test_ff3_bridge(self) -> None:
        """to_ff3 and from_ff3 are inverses."""
        e = ExtensionFieldElement((7, 0, P - 1))
        assert isinstance(e.to_ff3(), FF3)
        assert ExtensionFieldElement.from_ff3(e.to_ff3()) == e


class TestArithmetic:
    """Multiplication and inversion checked against galois polynomial arithmetic."""

    def test_x_cubed(self) -> None:
        """x^3 reduces to x + 1."""
        x = ExtensionFieldElement((0, 1, 0))
        assert x * x * x == ExtensionFieldElement((1, 1, 0))

    def test_x_fourth(self) -> None:
        """x^4 reduces to x^2 + x."""
        x = ExtensionFieldElement((0, 1, 0))
        assert x ** 4 == ExtensionFieldElement((0, 1, 1))

    def test_mul_matches_galois(self, rng) -> None:
        """Product equals polynomial product mod x^3 - x - 1."""
        for _ in range(20):
            a, b = _random_ext(rng), _random_ext(rng)
            expected = _from_poly((_as_poly(a) * _as_poly(b)) % MODULUS)
            assert a * b == expected

    def test_mul_matches_ff3(self, rng) -> None:
        """Product equals the FF3 product of the same coefficients."""
        for _ in range(20):
            a, b = _random_ext(rng), _random_ext(rng)
            expected = ff3(ext_coeffs(a)) * ff3(ext_coeffs(b))
            assert ext_coeffs(a * b) == ff3_coeffs(expected)

    def test_pow_matches_ff3(self, rng) -> None:
        """Small, large and negative exponents agree with FF3."""
        a = _random_ext(rng)
        for k in (2, 5, 1 << 40):
            assert ext_coeffs(a ** k) == ff3_coeffs(a.to_ff3() ** k)
        assert a ** -3 == (a ** 3).inv()
        assert a ** (1 << 70) == (a ** (1 << 35)) ** (1 << 35)

    def test_inverse(self, rng) -> None:
        """a * a^-1 == 1."""
        for _ in range(20):
            a = _random_ext(rng)
            assert a * a.inv() == ExtensionFieldElement.one()

    def test_inverse_of_base_element(self) -> None:
        """Inverse of a lifted element is the lifted inverse."""
        a = FieldElement(12345)
        assert lift(a).inv() == lift(a.inv())

    def test_inverse_of_zero_raises(self) -> None:
        """Inverting the zero tuple raises."""
        with pytest.raises(InverseOfZeroError):
            ExtensionFieldElement.zero().inv()

    def test_field_axioms(self, rng) -> None:
        """Distributivity, associativity and additive inverses."""
        for _ in range(10):
            a, b, c = _random_ext(rng), _random_ext(rng), _random_ext(rng)
            assert a * (b + c) == a * b + a * c
            assert (a * b) * c == a * (b * c)
            assert a - a == ExtensionFieldElement.zero()
            assert a + (-a) == 0

    def test_pow_zero(self) -> None:
        """x^0 == 1 including the zero element."""
        assert ExtensionFieldElement.zero() ** 0 == ExtensionFieldElement.one()

    def test_batch_inv(self, rng) -> None:
        """Batch inversion equals element-wise inversion."""
        vals = [_random_ext(rng) for _ in range(16)]
        assert ExtensionFieldElement.batch_inv(vals) == [v.inv() for v in vals]

    def test_scalar_mul(self) -> None:
        """scalar_mul scales every coefficient."""
        e = ExtensionFieldElement((1, 2, 3))
        assert e.scalar_mul(FieldElement(2)) == ExtensionFieldElement((2, 4, 6))


class TestBaseFieldEmbedding:
    """lift / project_to_base_field and mixed arithmetic."""

    def test_lift_is_homomorphism(self, rng) -> None:
        """lift(a) op lift(b) == lift(a op b)."""
        for _ in range(10):
            a, b = FieldElement(rng.randrange(P)), FieldElement(rng.randrange(P))
            assert lift(a) + lift(b) == lift(a + b)
            assert lift(a) * lift(b) == lift(a * b)

    def test_project_inverts_lift(self) -> None:
        """project(lift(a)) == a."""
        a = FieldElement(987654321)
        assert project_to_base_field(lift(a)) == a

    def test_project_rejects_non_base(self) -> None:
        """Elements with a nonzero a1 or a2 cannot be projected."""
        with pytest.raises(NotInBaseFieldError):
            ExtensionFieldElement((1, 0, 1)).project_to_base_field()

    def test_mixed_arithmetic(self) -> None:
        """Base elements on either side are lifted automatically."""
        e = ExtensionFieldElement((1, 2, 3))
        b = FieldElement(2)
        assert e * b == ExtensionFieldElement((2, 4, 6))
        assert b * e == ExtensionFieldElement((2, 4, 6))
        assert b + e == ExtensionFieldElement((3, 2, 3))
        assert b - e == ExtensionFieldElement((1, -2, -3))

    def test_equality_with_base(self) -> None:
        """An embedded element equals its base value and hashes alike."""
        assert lift(FieldElement(9)) == FieldElement(9)
        assert FieldElement(9) == lift(FieldElement(9))
        assert hash(lift(FieldElement(9))) == hash(FieldElement(9))
        assert ExtensionFieldElement((9, 1, 0)) != FieldElement(9)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
