import numpy as np

from qviz import gates as g
from qviz.apply import (
    apply_cnot,
    apply_k_qubit_gate,
    apply_operation,
    apply_single_qubit_gate,
    apply_swap,
)
from qviz.operations import CNOTOp, SingleQubitOp, SwapOp
from qviz.simulator import run_statevector
from qviz.state import basis_state, norm_squared, zero_state


def _random_state(num_qubits, seed):
    rng = np.random.default_rng(seed)
    psi = rng.normal(size=2 ** num_qubits) + 1j * rng.normal(size=2 ** num_qubits)
    return psi / np.linalg.norm(psi)


def test_empty_program_is_zero_state():
    psi = run_statevector([], 3)
    assert psi.shape == (8,)
    assert np.allclose(psi, np.array([1, 0, 0, 0, 0, 0, 0, 0], dtype=complex))


def test_x_on_qubit0_flips_msb():
    # qubit 0 is the most significant bit: |100> is index 4 for 3 qubits
    psi = run_statevector([SingleQubitOp(g.GateKind.X, 0)], 3)

    expected = np.zeros(8, dtype=complex)
    expected[4] = 1.0
    assert np.allclose(psi, expected)


def test_h_on_single_qubit():
    psi = run_statevector([SingleQubitOp("H", 0)], 1)
    assert np.allclose(psi, np.array([1, 1], dtype=complex) / np.sqrt(2))


def test_bell_state():
    psi = run_statevector([SingleQubitOp("H", 0), CNOTOp(control=0, target=1)], 2)
    expected = np.array([1, 0, 0, 1], dtype=complex) / np.sqrt(2)
    assert np.allclose(psi, expected, atol=1e-12)


def test_norm_preserved_by_single_qubit_gates():
    ops = [
        SingleQubitOp("H", 0),
        SingleQubitOp("RX", 1, 0.7),
        SingleQubitOp("Y", 2),
        SingleQubitOp("RY", 0, 2.1),
        SingleQubitOp("RZ", 2, 5.9),
        SingleQubitOp("Z", 1),
        SingleQubitOp("X", 0),
        SingleQubitOp("I", 2),
    ]
    psi = _random_state(3, seed=11)
    before = norm_squared(psi)

    for op in ops:
        psi = apply_operation(psi, op, 3)
        assert abs(norm_squared(psi) - before) < 1e-9


def test_double_x_returns_original_state():
    psi = _random_state(4, seed=3)
    for q in range(4):
        once = apply_single_qubit_gate(psi, g.X, q, 4)
        twice = apply_single_qubit_gate(once, g.X, q, 4)
        assert np.array_equal(twice, psi)


def test_apply_does_not_mutate_input():
    psi = zero_state(2)
    copy = psi.copy()
    apply_operation(psi, SingleQubitOp("H", 1), 2)
    apply_operation(psi, CNOTOp(0, 1), 2)
    assert np.array_equal(psi, copy)


def test_cnot_permutation_matches_matrix_for_two_qubits():
    psi = _random_state(2, seed=5)

    # control 0 / target 1 is the library matrix as-is
    assert np.allclose(apply_cnot(psi, 0, 1, 2), g.CNOT @ psi, atol=1e-12)

    # control 1 / target 0 is the same matrix with the wires swapped
    flipped = g.SWAP @ g.CNOT @ g.SWAP
    assert np.allclose(apply_cnot(psi, 1, 0, 2), flipped @ psi, atol=1e-12)


def test_cnot_permutation_matches_embedded_matrix_on_more_qubits():
    n = 4
    psi = _random_state(n, seed=9)
    for control in range(n):
        for target in range(n):
            if control == target:
                continue
            direct = apply_cnot(psi, control, target, n)
            embedded = apply_k_qubit_gate(psi, g.CNOT, [control, target], n)
            assert np.allclose(direct, embedded, atol=1e-12)


def test_swap_permutation_matches_matrix():
    psi = _random_state(3, seed=21)
    direct = apply_swap(psi, 0, 2, 3)
    embedded = apply_k_qubit_gate(psi, g.SWAP, [0, 2], 3)
    assert np.allclose(direct, embedded, atol=1e-12)

    psi = run_statevector([SingleQubitOp("X", 0), SwapOp(0, 2)], 3)
    assert np.allclose(psi, basis_state(1, 3))


def test_nan_angle_is_treated_as_zero():
    psi = run_statevector([SingleQubitOp("H", 0), SingleQubitOp("RY", 0, float("nan"))], 1)
    assert not np.any(np.isnan(psi))
    assert np.allclose(psi, np.array([1, 1], dtype=complex) / np.sqrt(2))


def test_infinite_angle_is_treated_as_zero():
    for bad in (float("inf"), float("-inf")):
        psi = run_statevector([SingleQubitOp("H", 0), SingleQubitOp("RY", 0, bad)], 1)
        assert not np.any(np.isnan(psi))
        assert np.allclose(psi, np.array([1, 1], dtype=complex) / np.sqrt(2))


def test_cnot_same_wire_raises():
    try:
        apply_cnot(zero_state(2), 1, 1, 2)
        assert False, "Expected ValueError for control == target"
    except ValueError:
        pass


def test_unknown_operation_raises():
    try:
        apply_operation(zero_state(1), ("H", 0), 1)
        assert False, "Expected TypeError for an unknown operation"
    except TypeError:
        pass


def test_out_of_range_target_rejected():
    try:
        run_statevector([SingleQubitOp("X", 2)], 2)
        assert False, "Expected ValueError for out-of-range target"
    except ValueError:
        pass
