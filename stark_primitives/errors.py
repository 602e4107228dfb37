"""Error taxonomy for field, transform, polynomial and Merkle operations.

Every error is a caller-contract violation detected at the offending call.
Each class also derives from the builtin exception a caller would naturally
catch (ZeroDivisionError, ValueError, ...), so code written against plain
Python exceptions keeps working.
"""


class StarkPrimitivesError(Exception):
    """Base class for all errors raised by this package."""


# --- Field arithmetic ---

class InverseOfZeroError(StarkPrimitivesError, ZeroDivisionError):
    """Attempted to invert the additive identity."""


class NotInBaseFieldError(StarkPrimitivesError, ValueError):
    """Extension element has a nonzero non-constant coefficient."""


# --- Transforms and polynomials ---

class InvalidDomainSizeError(StarkPrimitivesError, ValueError):
    """Domain size is not a power of two dividing p - 1, or too small."""


class DivisionByZeroPolynomialError(StarkPrimitivesError, ZeroDivisionError):
    """Polynomial division by the zero polynomial."""


class DuplicatePointError(StarkPrimitivesError, ValueError):
    """Two interpolation points coincide."""


class MismatchedLengthsError(StarkPrimitivesError, ValueError):
    """Points and values sequences differ in length."""


# --- Merkle tree ---

class InvalidLeafCountError(StarkPrimitivesError, ValueError):
    """Leaf count is not a power of two."""


class IndexOutOfBoundsError(StarkPrimitivesError, IndexError):
    """Leaf index outside [0, leaf_count)."""


class TreeNotBuiltError(StarkPrimitivesError, RuntimeError):
    """Tree queried before build() was called."""


# --- Serialization ---

class EncodingError(StarkPrimitivesError, ValueError):
    """Byte string has the wrong length or holds a non-canonical value."""
