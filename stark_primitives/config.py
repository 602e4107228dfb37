"""Fixed system parameters and tunables.

Frozen dataclasses: the sponge parameters are a single system-wide instance,
the transform settings may be overridden per call where an operation accepts
a ``config`` argument.
"""

import math
from dataclasses import dataclass

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001


@dataclass(frozen=True)
class SpongeParams:
    """Sponge geometry.

    Attributes:
        state_size: Number of field elements in the permutation state
        capacity: Elements of the state never touched by absorption
        digest_length: Elements squeezed into a Digest
        num_rounds: Rounds of the permutation
        sbox_exponent: Power map used by the substitution layer
    """

    state_size: int = 16
    capacity: int = 6
    digest_length: int = 5
    num_rounds: int = 7
    sbox_exponent: int = 7

    def __post_init__(self) -> None:
        if not 0 < self.capacity < self.state_size:
            raise ValueError(
                f"capacity must be in (0, {self.state_size}), got {self.capacity}"
            )
        if self.digest_length > self.rate:
            raise ValueError(
                f"digest_length {self.digest_length} exceeds rate {self.rate}"
            )
        if 2 * self.digest_length > self.rate:
            raise ValueError("two digests must fit in the rate for pair hashing")
        if math.gcd(self.sbox_exponent, GOLDILOCKS_PRIME - 1) != 1:
            raise ValueError(
                f"x^{self.sbox_exponent} is not a permutation of the field"
            )

    @property
    def rate(self) -> int:
        """Elements absorbed per permutation call."""
        return self.state_size - self.capacity


@dataclass(frozen=True)
class TransformConfig:
    """Transform-related tunables.

    Attributes:
        mul_ntt_threshold: Product length (coefficients) above which polynomial
            multiplication switches from schoolbook to NTT
        interpolation_ntt_fastpath: Use INTT when interpolating over a full
            roots-of-unity domain
        two_adicity: log2 of the largest power of two dividing p - 1
    """

    mul_ntt_threshold: int = 64
    interpolation_ntt_fastpath: bool = True
    two_adicity: int = 32

    def __post_init__(self) -> None:
        if self.mul_ntt_threshold < 1:
            raise ValueError(
                f"mul_ntt_threshold must be positive, got {self.mul_ntt_threshold}"
            )

    @property
    def max_domain_size(self) -> int:
        return 1 << self.two_adicity


SPONGE_PARAMS = SpongeParams()
DEFAULT_TRANSFORM_CONFIG = TransformConfig()
