"""Montgomery batch inversion.

The Montgomery trick converts N field inversions into 3N-3 multiplications + 1 inversion.

Two flavours:
- batch_inverse_elements(): lists of FieldElement / ExtensionFieldElement
- batch_inverse(): galois FieldArray (vectorised callers such as coset division)

Both are element-by-element identical to inverting each value on its own and
reject zero inputs with InverseOfZeroError before doing any work.
"""

from typing import List, Sequence, TypeVar

import numpy as np

from stark_primitives.errors import InverseOfZeroError

T = TypeVar("T")


def batch_inverse_elements(values: Sequence[T]) -> List[T]:
    """Montgomery batch inversion for scalar field elements.

    Algorithm:
    1. Forward pass: prefix products cumprods[i] = a[0] * a[1] * ... * a[i]
    2. Single inversion: inv_total = cumprods[N-1]^(-1)
    3. Backward pass: peel individual inverses off using cumprods

    Args:
        values: Elements to invert (all must be non-zero)

    Returns:
        List where result[i] = values[i]^(-1)

    Raises:
        InverseOfZeroError: If any element is zero
    """
    n = len(values)
    if n == 0:
        return []
    for i, value in enumerate(values):
        if value.is_zero():
            raise InverseOfZeroError(f"cannot invert zero element at index {i}")

    # Scratch buffer is local to this call
    cumprods = [values[0]] * n
    for i in range(1, n):
        cumprods[i] = cumprods[i - 1] * values[i]

    z = cumprods[n - 1].inv()

    results: List[T] = [values[0]] * n
    for i in range(n - 1, 0, -1):
        results[i] = z * cumprods[i - 1]
        z = z * values[i]
    results[0] = z

    return results


def batch_inverse(values):
    """Montgomery batch inversion for a 1-D galois FieldArray.

    Args:
        values: galois FieldArray to invert (must all be non-zero)

    Returns:
        FieldArray of the same type where result[i] = values[i]^(-1)

    Raises:
        InverseOfZeroError: If any element is zero
    """
    n = len(values)
    if n == 0:
        return values

    zero_positions = np.flatnonzero(values == 0)
    if zero_positions.size > 0:
        raise InverseOfZeroError(
            f"cannot invert zero element at index {int(zero_positions[0])}"
        )

    if n == 1:
        return values ** -1

    field_type = type(values)

    cumprods = field_type.Zeros(n)
    cumprods[0] = values[0]
    for i in range(1, n):
        cumprods[i] = cumprods[i - 1] * values[i]

    inv_total = cumprods[n - 1] ** -1

    results = field_type.Zeros(n)
    z = inv_total
    for i in range(n - 1, 0, -1):
        results[i] = z * cumprods[i - 1]
        z = z * values[i]
    results[0] = z

    return results
