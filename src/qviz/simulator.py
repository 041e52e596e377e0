from __future__ import annotations
from typing     import Iterable, Optional

import numpy as np

from .state      import zero_state, validate_state, copy_state, check_num_qubits
from .apply      import apply_operation
from .operations import Operation



def _validate_operation(op: Operation, num_qubits: int) -> None:
    targets = tuple(op.targets)

    if len(targets) == 0:
        raise ValueError("Operation has no targets")

    if any(t < 0 or t >= num_qubits for t in targets):
        raise ValueError(f"Operation targets out of range: {op!r}")

    if len(set(targets)) != len(targets):
        raise ValueError(f"Operation targets must be unique: {op!r}")


def run_statevector(
    ops: Iterable[Operation],
    num_qubits: int,
    initial_state: Optional[np.ndarray] = None,
    *, validate: bool = True,
) -> np.ndarray:
    """Fold `ops` left to right into a single state, starting from |0...0> by default."""

    check_num_qubits(num_qubits)

    if initial_state is None:
        state = zero_state(num_qubits)
    else:
        validate_state(initial_state, num_qubits)
        state = copy_state(initial_state)

    for op in ops:
        if validate:
            _validate_operation(op, num_qubits)

        state = apply_operation(state, op, num_qubits)

    if validate:
        norm = np.linalg.norm(state)
        if not np.isclose(norm, 1.0, atol=1e-10):
            raise ValueError(f"State norm drifted: ||psi||={norm} (expected ~1.0)")

    return state
