"""Canonical byte encodings.

All integers are 8-byte little-endian ('<Q'). Field values must be canonical
(< p) when decoding; anything else raises EncodingError.
"""

import struct
from typing import List

from stark_primitives.config import GOLDILOCKS_PRIME
from stark_primitives.errors import EncodingError
from stark_primitives.extension_field import EXTENSION_DEGREE, ExtensionFieldElement
from stark_primitives.field import FieldElement
from stark_primitives.merkle_tree import AuthenticationPath
from stark_primitives.sponge import DIGEST_LENGTH, Digest

ELEMENT_SIZE = 8
EXTENSION_ELEMENT_SIZE = EXTENSION_DEGREE * ELEMENT_SIZE
DIGEST_SIZE = DIGEST_LENGTH * ELEMENT_SIZE


# --- Helpers ---

def _unpack_canonical(data: bytes, count: int, what: str) -> List[int]:
    expected = count * ELEMENT_SIZE
    if len(data) != expected:
        raise EncodingError(f"{what} needs {expected} bytes, got {len(data)}")
    values = list(struct.unpack(f"<{count}Q", data))
    for i, v in enumerate(values):
        if v >= GOLDILOCKS_PRIME:
            raise EncodingError(f"{what} limb {i} is not canonical: {v:#x}")
    return values


# --- Field elements ---

def encode_field_element(element: FieldElement) -> bytes:
    return struct.pack("<Q", element.to_canonical_integer())


def decode_field_element(data: bytes) -> FieldElement:
    return FieldElement(_unpack_canonical(data, 1, "field element")[0])


def encode_extension_element(element: ExtensionFieldElement) -> bytes:
    return struct.pack(
        f"<{EXTENSION_DEGREE}Q", *(c.to_canonical_integer() for c in element.coefficients)
    )


def decode_extension_element(data: bytes) -> ExtensionFieldElement:
    return ExtensionFieldElement(
        _unpack_canonical(data, EXTENSION_DEGREE, "extension element")
    )


# --- Digests and paths ---

def encode_digest(digest: Digest) -> bytes:
    return struct.pack(f"<{DIGEST_LENGTH}Q", *digest.to_ints())


def decode_digest(data: bytes) -> Digest:
    return Digest(tuple(_unpack_canonical(data, DIGEST_LENGTH, "digest")))


def encode_authentication_path(path: AuthenticationPath) -> bytes:
    """Leaf index followed by the sibling digests, lowest level first."""
    return struct.pack("<Q", path.leaf_index) + b"".join(
        encode_digest(s) for s in path.siblings
    )


def decode_authentication_path(data: bytes) -> AuthenticationPath:
    """Inverse of encode_authentication_path(); sibling count follows from the length."""
    if len(data) < ELEMENT_SIZE or (len(data) - ELEMENT_SIZE) % DIGEST_SIZE != 0:
        raise EncodingError(
            f"authentication path length {len(data)} is not 8 + 40k bytes"
        )
    (leaf_index,) = struct.unpack("<Q", data[:ELEMENT_SIZE])
    body = data[ELEMENT_SIZE:]
    siblings = tuple(
        decode_digest(body[i:i + DIGEST_SIZE]) for i in range(0, len(body), DIGEST_SIZE)
    )
    if len(siblings) < 64 and leaf_index >> len(siblings) != 0:
        raise EncodingError(
            f"leaf index {leaf_index} does not fit a path of {len(siblings)} levels"
        )
    return AuthenticationPath(leaf_index, siblings)
