"""
Algebraic sponge hash over the Goldilocks field.

State of 16 elements: rate 10 (absorbed), capacity 6 (never absorbed into).
Each round of the permutation applies
    1. S-box x^d (d = 7) to every element
    2. a circulant MDS linear layer
    3. the round constants
for 7 rounds. The digest is the first 5 state elements after absorption.

Two domains are kept apart through the capacity:
- variable length: capacity starts all zero, input is padded with 1 then 0s
- fixed length (exactly 10 elements): capacity[0] = 1, no padding
"""

import enum
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

from stark_primitives.config import GOLDILOCKS_PRIME, SPONGE_PARAMS
from stark_primitives.extension_field import ExtensionFieldElement
from stark_primitives.field import FieldElement

STATE_SIZE = SPONGE_PARAMS.state_size
RATE = SPONGE_PARAMS.rate
CAPACITY = SPONGE_PARAMS.capacity
DIGEST_LENGTH = SPONGE_PARAMS.digest_length
NUM_ROUNDS = SPONGE_PARAMS.num_rounds

# First row of the circulant linear layer
MDS_FIRST_ROW: Tuple[int, ...] = (
    256, 8192, 2, 1024, 1, 268436456, 1, 4194304,
    524288, 16, 8, 128, 16777216, 2048, 1073741824, 2,
)

# Row i is the first row rotated right by i: M[i][j] = first_row[(j - i) mod 16]
MDS_MATRIX: Tuple[Tuple[int, ...], ...] = tuple(
    tuple(MDS_FIRST_ROW[(j - i) % STATE_SIZE] for j in range(STATE_SIZE))
    for i in range(STATE_SIZE)
)

ROUND_CONSTANTS: Tuple[int, ...] = (
    3006656781416918236,
    4369161505641058227,
    6684374425476535479,
    15779820574306927140,
    9604497860052635077,
    6451419160553310210,
    16926195364602274076,
    6738541355147603274,
    13653823767463659393,
    16331310420018519380,
    10921208506902903237,
    5856388654420905056,
    180518533287168595,
    6394055120127805757,
    4624620449883041133,
    4245779370310492662,
    11436753067664141475,
    9565904130524743243,
    1795462928700216574,
    6069083569854718822,
    16847768509740167846,
    4958030292488314453,
    6638656158077421079,
    7387994719600814898,
    1380138540257684527,
    2756275326704598308,
    6162254851582803897,
    4357202747710082448,
    12150731779910470904,
    3121517886069239079,
    14951334357190345445,
    11174705360936334066,
    17619090104023680035,
    9879300494565649603,
    6833140673689496042,
    8026685634318089317,
    6481786893261067369,
    15148392398843394510,
    11231860157121869734,
    2645253741394956018,
    15345701758979398253,
    1715545688795694261,
    3419893440622363282,
    12314745080283886274,
    16173382637268011204,
    2012426895438224656,
    6886681868854518019,
    9323151312904004776,
    14061124303940833928,
    14720644192628944300,
    3643016909963520634,
    15164487940674916922,
    18095609311840631082,
    17450128049477479068,
    13770238146408051799,
    959547712344137104,
    12896174981045071755,
    15673600445734665670,
    5421724936277706559,
    15147580014608980436,
    10475549030802107253,
    9781768648599053415,
    12208559126136453589,
    14883846462224929329,
    4104889747365723917,
    748723978556009523,
    1227256388689532469,
    5479813539795083611,
    8771502115864637772,
    16732275956403307541,
    4416407293527364014,
    828170020209737786,
    12657110237330569793,
    6054985640939410036,
    4339925773473390539,
    12523290846763939879,
    6515670251745069817,
    3304839395869669984,
    13139364704983394567,
    7310284340158351735,
    10864373318031796808,
    17752126773383161797,
    1934077736434853411,
    12181011551355087129,
    16512655861290250275,
    17788869165454339633,
    12226346139665475316,
    521307319751404755,
    18194723210928015140,
    11017703779172233841,
    15109417014344088693,
    16118100307150379696,
    16104548432406078622,
    10637262801060241057,
    10146828954247700859,
    14927431817078997000,
    8849391379213793752,
    14873391436448856814,
    15301636286727658488,
    14600930856978269524,
    14900320206081752612,
    9439125422122803926,
    17731778886181971775,
    11364016993846997841,
    11610707911054206249,
    16438527050768899002,
    1230592087960588528,
    11390503834342845303,
    10608561066917009324,
    5454068995870010477,
    13783920070953012756,
    10807833173700567220,
)

if len(ROUND_CONSTANTS) != NUM_ROUNDS * STATE_SIZE:
    raise ValueError(
        f"expected {NUM_ROUNDS * STATE_SIZE} round constants, got {len(ROUND_CONSTANTS)}"
    )


# --- Permutation ---

SBOX_EXPONENT = SPONGE_PARAMS.sbox_exponent


def _sbox(x: int) -> int:
    return pow(x, SBOX_EXPONENT, GOLDILOCKS_PRIME)


def _mds(state: List[int]) -> List[int]:
    return [
        sum(m * s for m, s in zip(row, state)) % GOLDILOCKS_PRIME
        for row in MDS_MATRIX
    ]


def _add_round_constants(state: List[int], round_index: int) -> List[int]:
    offset = round_index * STATE_SIZE
    constants = ROUND_CONSTANTS[offset:offset + STATE_SIZE]
    return [(s + c) % GOLDILOCKS_PRIME for s, c in zip(state, constants)]


def permutation(state: Sequence[int]) -> List[int]:
    """
    Apply the full permutation to a 16-element state.

    Args:
        state: 16 integers (reduced mod p on entry)

    Returns:
        New list of 16 canonical integers
    """
    if len(state) != STATE_SIZE:
        raise ValueError(f"state must have {STATE_SIZE} elements, got {len(state)}")

    current = [int(x) % GOLDILOCKS_PRIME for x in state]
    for r in range(NUM_ROUNDS):
        current = [_sbox(x) for x in current]
        current = _mds(current)
        current = _add_round_constants(current, r)
    return current


# --- Digest ---

@dataclass(frozen=True)
class Digest:
    """Five field elements produced by the sponge."""

    values: Tuple[FieldElement, ...]

    def __post_init__(self) -> None:
        values = tuple(
            v if isinstance(v, FieldElement) else FieldElement(v) for v in self.values
        )
        if len(values) != DIGEST_LENGTH:
            raise ValueError(
                f"digest must have {DIGEST_LENGTH} elements, got {len(values)}"
            )
        object.__setattr__(self, "values", values)

    @classmethod
    def zero(cls) -> "Digest":
        """All-zero digest, used to pad leaf layers."""
        return cls((0,) * DIGEST_LENGTH)

    def to_ints(self) -> List[int]:
        return [v.to_canonical_integer() for v in self.values]

    def __iter__(self):
        return iter(self.values)

    def __str__(self) -> str:
        return ",".join(f"{v.to_canonical_integer():016x}" for v in self.values)


class Domain(enum.Enum):
    """Domain separator written into the capacity before absorption."""

    VARIABLE_LENGTH = 0
    FIXED_LENGTH = 1


# --- Sponge ---

Absorbable = Union[FieldElement, ExtensionFieldElement, int]


class SpongeHash:
    """Stateless front end to the sponge; each call runs on a fresh state."""

    def hash_varlen(self, elements: Iterable[Absorbable]) -> Digest:
        """Hash any number of elements (variable-length domain)."""
        return Digest(tuple(self.squeeze_varlen(elements, DIGEST_LENGTH)))

    def squeeze_varlen(
        self, elements: Iterable[Absorbable], num_elements: int
    ) -> List[FieldElement]:
        """
        Absorb elements in the variable-length domain and squeeze num_elements.

        Squeezing reads the whole rate and permutes again while more output is
        needed, so the first DIGEST_LENGTH outputs equal hash_varlen().
        """
        if num_elements < 0:
            raise ValueError(f"num_elements must be non-negative, got {num_elements}")

        state = self._absorb(_pad(_flatten(elements)), Domain.VARIABLE_LENGTH)

        output: List[int] = []
        while True:
            output.extend(state[:RATE])
            if len(output) >= num_elements:
                break
            state = permutation(state)
        return [FieldElement(x) for x in output[:num_elements]]

    def hash_10(self, elements: Sequence[Absorbable]) -> Digest:
        """Hash exactly RATE elements (fixed-length domain, one permutation)."""
        flat = _flatten(elements)
        if len(flat) != RATE:
            raise ValueError(f"hash_10 takes exactly {RATE} elements, got {len(flat)}")
        state = self._absorb(flat, Domain.FIXED_LENGTH)
        return Digest(tuple(state[:DIGEST_LENGTH]))

    def hash_pair(self, left: Digest, right: Digest) -> Digest:
        """Two-to-one compression for Merkle interior nodes."""
        return self.hash_10(left.to_ints() + right.to_ints())

    def hash_bytes(self, payload: bytes) -> Digest:
        """Hash a byte string through its injective field-element encoding."""
        return self.hash_varlen(bytes_to_field_elements(payload))

    def hash(self, payload: Union[bytes, Iterable[Absorbable]]) -> Digest:
        """Hash bytes or field elements, picking the matching entry point."""
        if isinstance(payload, (bytes, bytearray, memoryview)):
            return self.hash_bytes(bytes(payload))
        return self.hash_varlen(payload)

    @staticmethod
    def _absorb(elements: List[int], domain: Domain) -> List[int]:
        state = [0] * STATE_SIZE
        if domain is Domain.FIXED_LENGTH:
            state[RATE] = 1
        for start in range(0, len(elements), RATE):
            chunk = elements[start:start + RATE]
            for i, x in enumerate(chunk):
                state[i] = (state[i] + x) % GOLDILOCKS_PRIME
            state = permutation(state)
        return state


# --- Helpers ---

# Bytes per field element in the byte encoding; 2^56 < p
BYTES_PER_ELEMENT = 7


def bytes_to_field_elements(payload: bytes) -> List[FieldElement]:
    """
    Injective byte encoding: append 0x01, zero-pad to a multiple of 7 bytes,
    read each 7-byte chunk as a little-endian integer.
    """
    data = bytes(payload) + b"\x01"
    data += b"\x00" * (-len(data) % BYTES_PER_ELEMENT)
    return [
        FieldElement(int.from_bytes(data[i:i + BYTES_PER_ELEMENT], "little"))
        for i in range(0, len(data), BYTES_PER_ELEMENT)
    ]


def _flatten(elements: Iterable[Absorbable]) -> List[int]:
    """Canonical ints; extension elements contribute their three coefficients."""
    flat: List[int] = []
    for e in elements:
        if isinstance(e, ExtensionFieldElement):
            flat.extend(c.to_canonical_integer() for c in e.coefficients)
        else:
            flat.append(int(e) % GOLDILOCKS_PRIME)
    return flat


def _pad(elements: List[int]) -> List[int]:
    """Append 1 then zeros up to the next multiple of RATE."""
    padded = elements + [1]
    padded.extend([0] * (-len(padded) % RATE))
    return padded


# --- Module-level API ---

DEFAULT_SPONGE = SpongeHash()


def hash_varlen(elements: Iterable[Absorbable]) -> Digest:
    return DEFAULT_SPONGE.hash_varlen(elements)


def squeeze_varlen(elements: Iterable[Absorbable], num_elements: int) -> List[FieldElement]:
    return DEFAULT_SPONGE.squeeze_varlen(elements, num_elements)


def hash_10(elements: Sequence[Absorbable]) -> Digest:
    return DEFAULT_SPONGE.hash_10(elements)


def hash_pair(left: Digest, right: Digest) -> Digest:
    return DEFAULT_SPONGE.hash_pair(left, right)


def hash_bytes(payload: bytes) -> Digest:
    return DEFAULT_SPONGE.hash_bytes(payload)


def hash_payload(payload: Union[bytes, Iterable[Absorbable]]) -> Digest:
    return DEFAULT_SPONGE.hash(payload)
