"""Shared capability of the base field and its extension.

FieldElement and ExtensionFieldElement implement this interface independently;
neither inherits from the other. Operators, exponentiation and batch inversion
are written once here in terms of the abstract primitives.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, TypeVar

from stark_primitives.batch_inverse import batch_inverse_elements

F = TypeVar("F", bound="FieldArithmetic")


class FieldArithmetic(ABC):
    """Field element vocabulary: add/sub/neg/mul/inv/pow plus operators."""

    __slots__ = ()

    # --- Primitives ---

    @classmethod
    @abstractmethod
    def zero(cls: type[F]) -> F:
        """Additive identity."""

    @classmethod
    @abstractmethod
    def one(cls: type[F]) -> F:
        """Multiplicative identity."""

    @abstractmethod
    def add(self: F, other: F) -> F:
        pass

    @abstractmethod
    def sub(self: F, other: F) -> F:
        pass

    @abstractmethod
    def mul(self: F, other: F) -> F:
        pass

    @abstractmethod
    def neg(self: F) -> F:
        pass

    @abstractmethod
    def inv(self: F) -> F:
        """Multiplicative inverse; raises InverseOfZeroError on zero."""

    @abstractmethod
    def is_zero(self) -> bool:
        pass

    @abstractmethod
    def _coerce(self, other):
        """Convert `other` to this type, or return NotImplemented."""

    # --- Derived operations ---

    def is_one(self) -> bool:
        return self == self.one()

    def pow(self: F, exponent: int) -> F:
        """Square-and-multiply. Exponent 0 gives one, including 0^0."""
        if exponent < 0:
            return self.inv().pow(-exponent)
        result = self.one()
        base = self
        while exponent:
            if exponent & 1:
                result = result.mul(base)
            base = base.mul(base)
            exponent >>= 1
        return result

    @classmethod
    def batch_inv(cls, values: Sequence[F]) -> List[F]:
        """Invert many elements with one field inversion (Montgomery's trick)."""
        return batch_inverse_elements(values)

    # --- Operators ---

    def __add__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other.add(self)

    def __sub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self.sub(other)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other.sub(self)

    def __mul__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self.mul(other)

    def __rmul__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other.mul(self)

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self.mul(other.inv())

    def __rtruediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other.mul(self.inv())

    def __neg__(self):
        return self.neg()

    def __pow__(self, exponent: int):
        if not isinstance(exponent, int):
            return NotImplemented
        return self.pow(exponent)

    def __bool__(self) -> bool:
        return not self.is_zero()
