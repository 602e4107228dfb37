"""Tests for canonical byte encodings."""

import struct

import pytest

from stark_primitives.encoding import (
    DIGEST_SIZE,
    decode_authentication_path,
    decode_digest,
    decode_extension_element,
    decode_field_element,
    encode_authentication_path,
    encode_digest,
    encode_extension_element,
    encode_field_element,
)
from stark_primitives.errors import EncodingError
from stark_primitives.extension_field import ExtensionFieldElement
from stark_primitives.field import GOLDILOCKS_PRIME, FieldElement
from stark_primitives.merkle_tree import build
from stark_primitives.sponge import Digest, hash_varlen

P = GOLDILOCKS_PRIME


class TestFieldEncoding:
    """8-byte little-endian field elements."""

    def test_layout(self) -> None:
        """Little-endian, eight bytes."""
        assert encode_field_element(FieldElement(1)) == b"\x01" + b"\x00" * 7
        assert encode_field_element(FieldElement(P - 1)) == struct.pack("<Q", P - 1)

    def test_roundtrip(self) -> None:
        """decode inverts encode."""
        for v in (0, 1, 12345678901234, P - 1):
            assert decode_field_element(encode_field_element(FieldElement(v))) == v

    def test_non_canonical_rejected(self) -> None:
        """Values >= p are not valid encodings."""
        with pytest.raises(EncodingError):
            decode_field_element(struct.pack("<Q", P))
        with pytest.raises(EncodingError):
            decode_field_element(b"\xff" * 8)

    @pytest.mark.parametrize("length", [0, 7, 9])
    def test_wrong_length(self, length: int) -> None:
        """Exactly eight bytes are required."""
        with pytest.raises(EncodingError):
            decode_field_element(b"\x00" * length)

    def test_extension_element(self) -> None:
        """Three limbs in basis order."""
        e = ExtensionFieldElement((1, 2, 3))
        data = encode_extension_element(e)
        assert data == struct.pack("<3Q", 1, 2, 3)
        assert decode_extension_element(data) == e
        with pytest.raises(EncodingError):
            decode_extension_element(data[:16])


class TestDigestEncoding:
    """40-byte digests."""

    def test_roundtrip(self) -> None:
        """decode inverts encode."""
        d = hash_varlen([1, 2, 3])
        data = encode_digest(d)
        assert len(data) == DIGEST_SIZE == 40
        assert decode_digest(data) == d

    def test_non_canonical_limb(self) -> None:
        """One bad limb rejects the whole digest."""
        data = struct.pack("<5Q", 0, 0, P, 0, 0)
        with pytest.raises(EncodingError):
            decode_digest(data)


class TestPathEncoding:
    """Leaf index plus sibling digests."""

    def test_roundtrip(self) -> None:
        """Encoded paths decode to equal paths."""
        tree = build([hash_varlen([i]) for i in range(8)])
        path = tree.authentication_path(5)
        data = encode_authentication_path(path)
        assert len(data) == 8 + 3 * DIGEST_SIZE
        assert decode_authentication_path(data) == path

    def test_empty_path(self) -> None:
        """A single-leaf tree path is just the index."""
        tree = build([Digest.zero()])
        data = encode_authentication_path(tree.authentication_path(0))
        assert data == b"\x00" * 8
        assert len(decode_authentication_path(data)) == 0

    @pytest.mark.parametrize("length", [0, 7, 9, 8 + 39])
    def test_bad_length(self, length: int) -> None:
        """Length must be 8 + 40k."""
        with pytest.raises(EncodingError):
            decode_authentication_path(b"\x00" * length)

    def test_index_too_large(self) -> None:
        """The index must fit the number of levels."""
        data = struct.pack("<Q", 4) + encode_digest(Digest.zero()) * 2
        with pytest.raises(EncodingError):
            decode_authentication_path(data)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
