"""STARK primitives - field arithmetic, transforms, polynomials, sponge hash and Merkle trees."""

from stark_primitives.batch_inverse import batch_inverse, batch_inverse_elements
from stark_primitives.config import (
    DEFAULT_TRANSFORM_CONFIG,
    GOLDILOCKS_PRIME,
    SPONGE_PARAMS,
    SpongeParams,
    TransformConfig,
)
from stark_primitives.encoding import (
    decode_authentication_path,
    decode_digest,
    decode_extension_element,
    decode_field_element,
    encode_authentication_path,
    encode_digest,
    encode_extension_element,
    encode_field_element,
)
from stark_primitives.errors import (
    DivisionByZeroPolynomialError,
    DuplicatePointError,
    EncodingError,
    IndexOutOfBoundsError,
    InvalidDomainSizeError,
    InvalidLeafCountError,
    InverseOfZeroError,
    MismatchedLengthsError,
    NotInBaseFieldError,
    StarkPrimitivesError,
    TreeNotBuiltError,
)
from stark_primitives.extension_field import (
    EXTENSION_DEGREE,
    FF3,
    ExtensionFieldElement,
    ff3,
    ff3_coeffs,
    lift,
    project_to_base_field,
)
from stark_primitives.field import (
    FF,
    SHIFT,
    SHIFT_INV,
    W,
    W_INV,
    FieldElement,
    get_omega,
    get_omega_inv,
    primitive_root_of_unity,
)
from stark_primitives.merkle_tree import (
    AuthenticationPath,
    MerkleTree,
    PartialAuthenticationPath,
    authentication_path,
    build,
    pad_leaf_digests,
    root,
)
from stark_primitives.merkle_verifier import MerkleVerifier, verify, verify_batch
from stark_primitives.ntt import NTT, coset_intt, coset_ntt, get_ntt_engine, intt, ntt
from stark_primitives.polynomial import (
    ZERO_POLYNOMIAL_DEGREE,
    Polynomial,
    extend_to_domain,
    to_coefficients,
    to_evaluations,
)
from stark_primitives.sponge import (
    Digest,
    SpongeHash,
    hash_10,
    hash_bytes,
    hash_pair,
    hash_payload,
    hash_varlen,
    permutation,
    squeeze_varlen,
)
from stark_primitives.traits import FieldArithmetic

__all__ = [
    # Config
    "GOLDILOCKS_PRIME",
    "SpongeParams",
    "TransformConfig",
    "SPONGE_PARAMS",
    "DEFAULT_TRANSFORM_CONFIG",
    # Errors
    "StarkPrimitivesError",
    "InverseOfZeroError",
    "NotInBaseFieldError",
    "InvalidDomainSizeError",
    "DivisionByZeroPolynomialError",
    "DuplicatePointError",
    "MismatchedLengthsError",
    "InvalidLeafCountError",
    "IndexOutOfBoundsError",
    "TreeNotBuiltError",
    "EncodingError",
    # Field
    "FieldArithmetic",
    "FieldElement",
    "FF",
    "W",
    "W_INV",
    "SHIFT",
    "SHIFT_INV",
    "get_omega",
    "get_omega_inv",
    "primitive_root_of_unity",
    "batch_inverse",
    "batch_inverse_elements",
    # Extension field
    "EXTENSION_DEGREE",
    "ExtensionFieldElement",
    "FF3",
    "ff3",
    "ff3_coeffs",
    "lift",
    "project_to_base_field",
    # NTT
    "NTT",
    "get_ntt_engine",
    "ntt",
    "intt",
    "coset_ntt",
    "coset_intt",
    # Polynomial
    "Polynomial",
    "ZERO_POLYNOMIAL_DEGREE",
    "to_coefficients",
    "to_evaluations",
    "extend_to_domain",
    # Sponge
    "SpongeHash",
    "Digest",
    "permutation",
    "hash_varlen",
    "squeeze_varlen",
    "hash_10",
    "hash_pair",
    "hash_bytes",
    "hash_payload",
    # Merkle tree
    "MerkleTree",
    "MerkleVerifier",
    "AuthenticationPath",
    "PartialAuthenticationPath",
    "pad_leaf_digests",
    "build",
    "root",
    "authentication_path",
    "verify",
    "verify_batch",
    # Encoding
    "encode_field_element",
    "decode_field_element",
    "encode_extension_element",
    "decode_extension_element",
    "encode_digest",
    "decode_digest",
    "encode_authentication_path",
    "decode_authentication_path",
]
