import logging
import math

import numpy as np

from .gates import I, gate_matrix
from .operations import CNOTOp, Operation, SingleQubitOp, SwapOp
from .state import validate_state

logger = logging.getLogger(__name__)


def _inverse_permutation(perm: list[int]) -> list[int]:
    inv = [0] * len(perm)
    for i, p in enumerate(perm):
        inv[p] = i
    return inv


def _check_qubit(q: int, num_qubits: int, name: str = "qubit") -> None:
    if q < 0 or q >= num_qubits:
        raise ValueError(f"{name} must be in [0, {num_qubits - 1}], got {q}")


def expand_single_qubit_gate(gate: np.ndarray, target: int, num_qubits: int) -> np.ndarray:
    """
    Full 2**n x 2**n operator: kron of n factors, `gate` at `target` and I
    everywhere else. Qubit 0 is the leftmost factor.
    """
    _check_qubit(target, num_qubits, "target")

    ops = []
    for qubit in range(num_qubits):
        if qubit == target:
            ops.append(gate)
        else:
            ops.append(I)

    big_op = ops[0]
    for op in ops[1:]:
        big_op = np.kron(big_op, op)

    return big_op


def apply_single_qubit_gate(state, gate, target: int, num_qubits: int) -> np.ndarray:
    validate_state(state, num_qubits)
    big_gate = expand_single_qubit_gate(np.asarray(gate, dtype=complex), target, num_qubits)
    return big_gate @ np.asarray(state, dtype=complex)


def apply_cnot(state, control: int, target: int, num_qubits: int) -> np.ndarray:
    """
    CNOT as an index permutation: every basis index whose control bit is 1 moves
    its amplitude to the index with the target bit flipped.
    """
    validate_state(state, num_qubits)
    if control == target:
        raise ValueError("control and target must be different")
    _check_qubit(control, num_qubits, "control")
    _check_qubit(target, num_qubits, "target")

    state = np.asarray(state, dtype=complex)
    dim = 2 ** num_qubits

    control_mask = 1 << (num_qubits - 1 - control)
    target_mask = 1 << (num_qubits - 1 - target)

    new_state = np.zeros_like(state)
    for i in range(dim):
        if i & control_mask:
            new_state[i ^ target_mask] = state[i]
        else:
            new_state[i] = state[i]

    return new_state


def apply_swap(state, q1: int, q2: int, num_qubits: int) -> np.ndarray:
    validate_state(state, num_qubits)
    _check_qubit(q1, num_qubits, "q1")
    _check_qubit(q2, num_qubits, "q2")

    state = np.asarray(state, dtype=complex)
    if q1 == q2:
        return state.copy()

    dim = 2 ** num_qubits
    m1 = 1 << (num_qubits - 1 - q1)
    m2 = 1 << (num_qubits - 1 - q2)

    new_state = state.copy()
    for i in range(dim):
        b1 = 1 if (i & m1) else 0
        b2 = 1 if (i & m2) else 0
        if b1 != b2:
            new_state[i ^ (m1 | m2)] = state[i]

    return new_state


def apply_k_qubit_gate(state, U, targets: list[int], num_qubits: int) -> np.ndarray:
    """
    Apply a k-qubit unitary U to the given statevector on the specified target qubits.
    Conventions:
    - Statevector length 2**num_qubits.
    - qubit indices are 0...num_qubits-1.
    - qubit 0 is most significant in basis ordering
    - targets[0] is the most significant qubit of U
    """
    validate_state(state, num_qubits)

    U = np.asarray(U, dtype=complex)
    state = np.asarray(state, dtype=complex)

    if U.ndim != 2 or U.shape[0] != U.shape[1]:
        raise ValueError(f"U must be a square matrix, got shape {U.shape}")

    k = len(targets)
    if k == 0:
        return state.copy()

    if len(set(targets)) != k:
        raise ValueError(f"targets must be unique, got {targets}")

    if any((t < 0 or t >= num_qubits) for t in targets):
        raise ValueError(f"targets out of range for num_qubits={num_qubits}: {targets}")

    dim_k = 2 ** k
    if U.shape != (dim_k, dim_k):
        raise ValueError(f"U shape must be {(dim_k, dim_k)} for k={k}, got {U.shape}")

    psi = state.reshape((2,) * num_qubits)

    remaining = [q for q in range(num_qubits) if q not in targets]
    perm = list(targets) + remaining

    psi_perm = np.transpose(psi, axes=perm)
    psi_mat = psi_perm.reshape(dim_k, -1)
    psi_mat2 = U @ psi_mat

    psi_perm2 = psi_mat2.reshape((2,) * num_qubits)
    inv_perm = _inverse_permutation(perm)
    psi2 = np.transpose(psi_perm2, axes=inv_perm)

    return psi2.reshape(-1)


def _clean_angle(angle):
    if angle is None:
        return None
    angle = float(angle)
    if not math.isfinite(angle):
        logger.debug("non-finite rotation angle %r replaced with 0", angle)
        return 0.0
    return angle


def apply_operation(state, op: Operation, num_qubits: int) -> np.ndarray:
    """Apply one gate operation and return the new state; `state` is left untouched."""
    if isinstance(op, SingleQubitOp):
        U = gate_matrix(op.kind, _clean_angle(op.angle))
        return apply_single_qubit_gate(state, U, op.qubit, num_qubits)

    if isinstance(op, CNOTOp):
        return apply_cnot(state, op.control, op.target, num_qubits)

    if isinstance(op, SwapOp):
        return apply_swap(state, op.qubit_a, op.qubit_b, num_qubits)

    raise TypeError(f"Unsupported operation: {op!r}")
