"""Number Theoretic Transform for Goldilocks field."""

import logging
import threading
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from stark_primitives.errors import InvalidDomainSizeError
from stark_primitives.extension_field import EXTENSION_DEGREE, ExtensionFieldElement
from stark_primitives.field import (
    FF,
    GOLDILOCKS_PRIME,
    SHIFT,
    FieldElement,
    get_omega,
    get_omega_inv,
    log2_domain,
)

logger = logging.getLogger(__name__)


# --- NTT Engine ---

class NTT:
    """Radix-2 NTT engine for a fixed power-of-two domain.

    Operates on galois FF arrays of shape (N,) or (N, n_cols); columns are
    transformed independently. All tables are built in the constructor and
    never modified afterwards, so one engine can be shared between threads.
    """

    def __init__(self, domain_size: int) -> None:
        """Initialize NTT engine for given domain size.

        Raises:
            InvalidDomainSizeError: If domain_size is not a power of two dividing p - 1
        """
        self.n_bits = log2_domain(domain_size)
        self.n = domain_size

        # roots[k] = omega^k, roots_inv[k] = omega^(-k)
        self.roots = _precompute_roots(get_omega(self.n_bits), domain_size)
        self.roots_inv = _precompute_roots(get_omega_inv(self.n_bits), domain_size)

        # 1/N mod p, applied once at the end of intt
        self.n_inv = FF(domain_size) ** -1

        self.bit_reversed = _bit_reverse_indices(self.n_bits)

        self._stage_twiddles = _stage_twiddles(self.roots, domain_size)
        self._stage_twiddles_inv = _stage_twiddles(self.roots_inv, domain_size)

    def ntt(self, coeffs: np.ndarray) -> np.ndarray:
        """Forward NTT: coefficients -> evaluations at omega^0 .. omega^(N-1)."""
        return self._transform(coeffs, self._stage_twiddles)

    def intt(self, evals: np.ndarray) -> np.ndarray:
        """Inverse NTT: evaluations -> coefficients."""
        result = self._transform(evals, self._stage_twiddles_inv)
        return result * self.n_inv

    def extend_pol(
        self,
        src: np.ndarray,
        n_extended: int,
        shift: FieldElement = SHIFT,
    ) -> np.ndarray:
        """Low-degree extension from this domain to the coset shift * <omega_ext>.

        INTT on the original domain, multiply coefficient i by shift^i,
        zero-pad to n_extended and NTT on the extended domain.
        """
        if n_extended < self.n or n_extended % self.n != 0:
            raise InvalidDomainSizeError(
                f"extended size {n_extended} must be a multiple of {self.n}"
            )

        input_is_1d = src.ndim == 1
        src_2d = _reshape_input(src)
        n_cols = src_2d.shape[1]

        coeffs = self.intt(src_2d)
        shift_powers = _precompute_roots(shift.to_canonical_integer(), self.n)
        coeffs = coeffs * shift_powers.reshape(self.n, 1)

        output = FF.Zeros((n_extended, n_cols))
        output[:self.n, :] = coeffs

        result = get_ntt_engine(n_extended).ntt(output)
        return result.flatten() if input_is_1d else result

    # --- Butterfly network ---

    def _transform(self, values: np.ndarray, stage_twiddles: List[np.ndarray]) -> np.ndarray:
        """Iterative decimation-in-time: bit-reversal, then log2(N) butterfly stages.

        Stage s combines pairs m = 2^s apart inside blocks of size 2m:
            u = a[k + j], v = a[k + j + m] * w_2m^j
            a[k + j] = u + v, a[k + j + m] = u - v
        Every block of a stage is independent, so a stage is one vectorised step.
        """
        if values.shape[0] != self.n:
            raise InvalidDomainSizeError(
                f"input length {values.shape[0]} does not match domain size {self.n}"
            )

        input_is_1d = values.ndim == 1
        a = _reshape_input(values)
        n_cols = a.shape[1]
        a = a[self.bit_reversed, :]

        m = 1
        for twiddles in stage_twiddles:
            n_blocks = self.n // (2 * m)
            blocks = a.reshape(n_blocks, 2, m, n_cols)
            u = blocks[:, 0, :, :]
            v = blocks[:, 1, :, :] * twiddles.reshape(1, m, 1)

            out = FF.Zeros((n_blocks, 2, m, n_cols))
            out[:, 0, :, :] = u + v
            out[:, 1, :, :] = u - v
            a = out.reshape(self.n, n_cols)
            m *= 2

        return a.flatten() if input_is_1d else a


# --- Engine Cache ---

_ENGINES: Dict[int, NTT] = {}
_ENGINES_LOCK = threading.Lock()


def get_ntt_engine(domain_size: int) -> NTT:
    """Return the shared engine for domain_size, building it at most once."""
    engine = _ENGINES.get(domain_size)
    if engine is not None:
        return engine
    with _ENGINES_LOCK:
        engine = _ENGINES.get(domain_size)
        if engine is None:
            logger.debug(f"Precomputing NTT tables for domain size {domain_size}")
            engine = NTT(domain_size)
            _ENGINES[domain_size] = engine
    return engine


# --- Element-list Interface ---

def ntt(values: Sequence, domain_size: Optional[int] = None) -> List:
    """Evaluate the coefficient vector `values` at the domain_size-th roots of unity.

    Accepts FieldElement, ExtensionFieldElement or int entries; extension
    elements are transformed coordinate-wise. Shorter input is zero-padded.

    Raises:
        InvalidDomainSizeError: If the size is invalid or smaller than len(values)
    """
    size = _resolve_domain_size(len(values), domain_size)
    matrix, is_extension = _to_matrix(values, size)
    return _from_matrix(get_ntt_engine(size).ntt(matrix), is_extension)


def intt(values: Sequence, domain_size: Optional[int] = None) -> List:
    """Inverse of ntt(): recover coefficients from evaluations."""
    size = _resolve_domain_size(len(values), domain_size)
    matrix, is_extension = _to_matrix(values, size)
    return _from_matrix(get_ntt_engine(size).intt(matrix), is_extension)


def coset_ntt(values: Sequence, offset, domain_size: Optional[int] = None) -> List:
    """Evaluate on the coset offset * <omega>: scale coefficient i by offset^i, then NTT."""
    return ntt(_scale_by_powers(values, offset), domain_size)


def coset_intt(values: Sequence, offset, domain_size: Optional[int] = None) -> List:
    """Inverse of coset_ntt()."""
    coeffs = intt(values, domain_size)
    return _scale_by_powers(coeffs, _as_scalar(offset).inv())


def low_degree_extend(
    values: Sequence,
    extended_size: int,
    shift: FieldElement = SHIFT,
) -> List:
    """Extend evaluations on <omega_N> to evaluations on shift * <omega_extended>."""
    size = _resolve_domain_size(len(values), None)
    matrix, is_extension = _to_matrix(values, size)
    extended = get_ntt_engine(size).extend_pol(matrix, extended_size, shift)
    return _from_matrix(extended, is_extension)


def bit_reverse(index: int, n_bits: int) -> int:
    """Reverse the low n_bits bits of index."""
    result = 0
    for _ in range(n_bits):
        result = (result << 1) | (index & 1)
        index >>= 1
    return result


# --- Helpers ---

def _resolve_domain_size(length: int, domain_size: Optional[int]) -> int:
    if domain_size is None:
        domain_size = length
    log2_domain(domain_size)
    if domain_size < length:
        raise InvalidDomainSizeError(
            f"domain size {domain_size} is smaller than input length {length}"
        )
    return domain_size


def _as_scalar(value):
    if isinstance(value, (FieldElement, ExtensionFieldElement)):
        return value
    return FieldElement(value)


def _scale_by_powers(values: Sequence, factor) -> List:
    factor = _as_scalar(factor)
    acc = FieldElement.one()
    result = []
    for v in values:
        result.append(_as_scalar(v) * acc)
        acc = acc * factor
    return result


def _to_matrix(values: Sequence, size: int) -> Tuple[np.ndarray, bool]:
    """Pack elements into an (size, width) FF array; width 3 for extension input."""
    is_extension = any(isinstance(v, ExtensionFieldElement) for v in values)
    width = EXTENSION_DEGREE if is_extension else 1
    rows = []
    for v in values:
        if isinstance(v, ExtensionFieldElement):
            rows.append([c.to_canonical_integer() for c in v.coefficients])
        else:
            rows.append([int(v) % GOLDILOCKS_PRIME] + [0] * (width - 1))
    rows.extend([0] * width for _ in range(size - len(values)))
    return FF(rows), is_extension


def _from_matrix(matrix: np.ndarray, is_extension: bool) -> List:
    if is_extension:
        return [ExtensionFieldElement(int(c) for c in row) for row in matrix]
    return [FieldElement(int(x)) for x in matrix[:, 0]]


def _precompute_roots(omega: int, n_roots: int) -> np.ndarray:
    """Precompute roots of unity: roots[k] = omega^k."""
    roots = FF.Zeros(n_roots)
    roots[0] = FF(1)
    if n_roots > 1:
        omega_ff = FF(omega)
        for i in range(1, n_roots):
            roots[i] = roots[i - 1] * omega_ff
    return roots


def _stage_twiddles(roots: np.ndarray, n: int) -> List[np.ndarray]:
    """Twiddles per stage: stage with half-size m uses w_2m^j = roots[j * N / 2m], j < m."""
    stages = []
    m = 1
    while m < n:
        stages.append(roots[:: n // (2 * m)][:m].copy())
        m *= 2
    return stages


def _bit_reverse_indices(n_bits: int) -> np.ndarray:
    """Permutation i -> bit_reverse(i, n_bits) for all i < 2^n_bits."""
    indices = np.arange(1 << n_bits)
    result = np.zeros_like(indices)
    for b in range(n_bits):
        result |= ((indices >> b) & 1) << (n_bits - 1 - b)
    return result


def _reshape_input(arr: np.ndarray) -> np.ndarray:
    """Reshape flat or 2D input to (N, n_cols) form."""
    if arr.ndim == 1:
        return arr.reshape(arr.shape[0], 1)
    elif arr.ndim == 2:
        return arr
    else:
        raise ValueError(f"Expected 1D or 2D array, got {arr.ndim}D")
