"""Tests for NTT implementation.

Verifies the array engine, the element-list interface and coset extension
against direct polynomial evaluation.
"""

import threading

import numpy as np
import pytest

from stark_primitives.errors import InvalidDomainSizeError
from stark_primitives.extension_field import ExtensionFieldElement
from stark_primitives.field import FF, SHIFT, FieldElement, get_omega
from stark_primitives.ntt import (
    NTT,
    bit_reverse,
    coset_intt,
    coset_ntt,
    get_ntt_engine,
    intt,
    low_degree_extend,
    ntt,
)


def _horner(coeffs, x):
    acc = FieldElement.zero()
    for c in reversed(coeffs):
        acc = acc * x + c
    return acc


class TestNTTEngine:
    """Array-level NTT operations."""

    @pytest.mark.parametrize("n_bits", [0, 1, 3, 4, 6, 8, 10])
    def test_ntt_intt_roundtrip_single_column(self, n_bits: int) -> None:
        """Test that INTT(NTT(x)) == x for single column."""
        N = 1 << n_bits
        engine = NTT(N)

        coeffs = FF.Random(N)
        recovered = engine.intt(engine.ntt(coeffs))

        assert np.array_equal(coeffs, recovered), "NTT/INTT roundtrip failed"

    @pytest.mark.parametrize("n_bits", [0, 1, 5, 12])
    def test_n_inv(self, n_bits: int) -> None:
        """n_inv is the inverse of the domain size."""
        engine = NTT(1 << n_bits)
        assert engine.n_inv * FF(1 << n_bits) == FF(1)

    @pytest.mark.parametrize("n_bits", [3, 4, 6])
    @pytest.mark.parametrize("n_cols", [1, 2, 4])
    def test_ntt_intt_roundtrip_multiple_columns(self, n_bits: int, n_cols: int) -> None:
        """Test that INTT(NTT(x)) == x for multiple columns."""
        N = 1 << n_bits
        engine = NTT(N)

        coeffs = FF.Random((N, n_cols))
        recovered = engine.intt(engine.ntt(coeffs))

        assert recovered.shape == (N, n_cols)
        assert np.array_equal(coeffs, recovered), "NTT/INTT roundtrip failed for multiple columns"

    def test_ntt_matches_direct_evaluation(self) -> None:
        """NTT(c)[i] == c(omega^i)."""
        N = 16
        engine = NTT(N)
        coeffs = FF.Random(N)
        evals = engine.ntt(coeffs)

        omega = FF(get_omega(4))
        for i in range(N):
            x = omega ** i
            expected = FF(0)
            for c in coeffs[::-1]:
                expected = expected * x + c
            assert evals[i] == expected

    def test_columns_are_independent(self) -> None:
        """Each column of a 2-D transform equals the 1-D transform of that column."""
        engine = NTT(8)
        data = FF.Random((8, 3))
        result = engine.ntt(data)
        for col in range(3):
            assert np.array_equal(result[:, col], engine.ntt(data[:, col]))

    def test_ntt_linearity(self) -> None:
        """Test that NTT is linear: NTT(a*x + b*y) == a*NTT(x) + b*NTT(y)."""
        engine = NTT(16)
        x = FF.Random(16)
        y = FF.Random(16)
        a = FF(5)
        b = FF(7)

        lhs = engine.ntt(a * x + b * y)
        rhs = a * engine.ntt(x) + b * engine.ntt(y)
        assert np.array_equal(lhs, rhs)

    def test_wrong_length_rejected(self) -> None:
        """Input length must equal the domain size."""
        with pytest.raises(InvalidDomainSizeError):
            NTT(8).ntt(FF.Random(4))

    @pytest.mark.parametrize("size", [0, 3, 12])
    def test_invalid_domain_size(self, size: int) -> None:
        """Non-power-of-two sizes are rejected."""
        with pytest.raises(InvalidDomainSizeError):
            NTT(size)

    def test_extend_pol_matches_coset_evaluation(self) -> None:
        """extend_pol gives p(SHIFT * omega_ext^i) for the interpolant p."""
        N, N_ext = 8, 32
        engine = NTT(N)
        evals = FF.Random(N)
        coeffs = engine.intt(evals)

        extended = engine.extend_pol(evals, N_ext)
        assert extended.shape == (N_ext,)

        omega_ext = FF(get_omega(5))
        shift = FF(SHIFT.value)
        for i in range(0, N_ext, 5):
            x = shift * omega_ext ** i
            expected = FF(0)
            for c in coeffs[::-1]:
                expected = expected * x + c
            assert extended[i] == expected

    def test_extend_pol_rejects_bad_size(self) -> None:
        """Extended size must be a multiple of the source size."""
        with pytest.raises(InvalidDomainSizeError):
            NTT(8).extend_pol(FF.Random(8), 4)


class TestEngineCache:
    """Shared per-size engines."""

    def test_same_instance(self) -> None:
        """Repeated lookups return the cached engine."""
        assert get_ntt_engine(64) is get_ntt_engine(64)

    def test_concurrent_first_use(self) -> None:
        """Threads racing on a fresh size all see one engine."""
        size = 1 << 11
        seen = []

        def worker() -> None:
            seen.append(get_ntt_engine(size))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(seen) == 8
        assert all(engine is seen[0] for engine in seen)

    def test_invalid_size_not_cached(self) -> None:
        """Invalid sizes raise every time."""
        for _ in range(2):
            with pytest.raises(InvalidDomainSizeError):
                get_ntt_engine(6)


class TestElementInterface:
    """List-level ntt / intt over FieldElement and ExtensionFieldElement."""

    def test_roundtrip(self, rng) -> None:
        """intt(ntt(v)) == v."""
        values = [FieldElement(rng.randrange(1 << 64)) for _ in range(16)]
        assert intt(ntt(values)) == values

    def test_matches_horner(self) -> None:
        """ntt evaluates at consecutive powers of omega."""
        coeffs = [FieldElement(c) for c in (1, 2, 3, 4)]
        omega = FieldElement(get_omega(2))
        assert ntt(coeffs) == [_horner(coeffs, omega ** i) for i in range(4)]

    def test_zero_padding(self) -> None:
        """Short input is padded up to the domain size."""
        coeffs = [FieldElement(3), FieldElement(1)]
        evals = ntt(coeffs, 8)
        assert len(evals) == 8
        omega = FieldElement(get_omega(3))
        assert evals == [_horner(coeffs, omega ** i) for i in range(8)]

    def test_too_long_input(self) -> None:
        """Input longer than the domain raises."""
        with pytest.raises(InvalidDomainSizeError):
            ntt([FieldElement(1)] * 8, 4)

    def test_non_power_of_two_length(self) -> None:
        """Without an explicit domain size the length must be a power of two."""
        with pytest.raises(InvalidDomainSizeError):
            ntt([FieldElement(1)] * 6)

    def test_extension_roundtrip(self, rng) -> None:
        """Extension elements round-trip coordinate-wise."""
        values = [
            ExtensionFieldElement(rng.randrange(1 << 64) for _ in range(3))
            for _ in range(8)
        ]
        result = ntt(values)
        assert all(isinstance(v, ExtensionFieldElement) for v in result)
        assert intt(result) == values

    def test_extension_matches_horner(self) -> None:
        """Coordinate-wise transform equals evaluation in GF(p^3)."""
        coeffs = [ExtensionFieldElement((i, 2 * i, 3 * i + 1)) for i in range(4)]
        omega = FieldElement(get_omega(2))
        assert ntt(coeffs) == [_horner(coeffs, omega ** i) for i in range(4)]

    def test_coset_roundtrip(self) -> None:
        """coset_intt inverts coset_ntt."""
        coeffs = [FieldElement(i * i + 1) for i in range(8)]
        evals = coset_ntt(coeffs, SHIFT)
        omega = FieldElement(get_omega(3))
        assert evals == [_horner(coeffs, SHIFT * omega ** i) for i in range(8)]
        assert coset_intt(evals, SHIFT) == coeffs

    def test_low_degree_extend(self) -> None:
        """Extension agrees with evaluating the interpolant on the shifted coset."""
        evals = [FieldElement(v) for v in (5, 9, 2, 7)]
        coeffs = intt(evals)
        extended = low_degree_extend(evals, 16)
        omega = FieldElement(get_omega(4))
        assert extended == [_horner(coeffs, SHIFT * omega ** i) for i in range(16)]


class TestBitReverse:
    """bit_reverse helper."""

    @pytest.mark.parametrize(
        "index,n_bits,expected",
        [(0, 3, 0), (1, 3, 4), (3, 3, 6), (6, 3, 3), (1, 1, 1), (0, 0, 0)],
    )
    def test_values(self, index: int, n_bits: int, expected: int) -> None:
        """Low n_bits bits are mirrored."""
        assert bit_reverse(index, n_bits) == expected

    def test_engine_permutation(self) -> None:
        """The engine's table agrees with bit_reverse."""
        engine = NTT(16)
        assert [int(i) for i in engine.bit_reversed] == [bit_reverse(i, 4) for i in range(16)]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
