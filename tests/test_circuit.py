import math

import numpy as np

from qviz.circuit import Circuit, compile_circuit, compile_program
from qviz.gates import GateKind
from qviz.operations import CNOTOp, PlacedGate, SingleQubitOp
from qviz.state import basis_state


def test_new_circuit_is_zero_state():
    c = Circuit(2)
    assert np.allclose(c.state, basis_state(0, 2))
    assert c.gates == []


def test_qubit_count_limits():
    for n in (0, 7):
        try:
            Circuit(n)
            assert False, f"Expected ValueError for {n} qubits"
        except ValueError:
            pass


def test_gates_apply_in_position_order_not_insertion_order():
    # H then Z gives |->, Z then H would give |+>
    c = Circuit(1)
    c.add_gate("Z", 0, position=20)
    c.add_gate("H", 0, position=10)

    expected = np.array([1, -1], dtype=complex) / np.sqrt(2)
    assert np.allclose(c.state, expected, atol=1e-12)
    assert [g.kind for g in c.gates] == [GateKind.H, GateKind.Z]


def test_equal_positions_keep_insertion_order():
    placed = [
        PlacedGate(0, "H", 0, 5.0),
        PlacedGate(1, "Z", 0, 5.0),
    ]
    ops = compile_program(placed, 1)
    assert [op.kind for op in ops] == [GateKind.H, GateKind.Z]

    # H then Z gives |->
    psi = compile_circuit(placed, 1)
    assert np.allclose(psi, np.array([1, -1], dtype=complex) / np.sqrt(2))


def test_cnot_markers_pair_into_one_operation():
    placed = [
        PlacedGate(0, "H", 0, 0.0),
        PlacedGate(2, "CNOT", 1, 1.0, control=False),
        PlacedGate(1, "CNOT", 0, 1.0, control=True),
    ]
    ops = compile_program(placed, 2)
    assert ops == [SingleQubitOp("H", 0), CNOTOp(control=0, target=1)]


def test_unpaired_cnot_marker_is_skipped():
    placed = [
        PlacedGate(0, "X", 0, 0.0),
        PlacedGate(1, "CNOT", 0, 1.0, control=True),
    ]
    ops = compile_program(placed, 2)
    assert ops == [SingleQubitOp("X", 0)]
    assert np.allclose(compile_circuit(placed, 2), basis_state(2, 2))


def test_cnot_markers_at_different_positions_do_not_pair():
    placed = [
        PlacedGate(0, "CNOT", 0, 1.0, control=True),
        PlacedGate(1, "CNOT", 1, 2.0, control=False),
    ]
    assert compile_program(placed, 2) == []


def test_bell_state_via_circuit():
    c = Circuit(2)
    c.add_gate("H", 0, position=0)
    c.add_cnot(control=0, target=1, position=1)
    assert np.allclose(c.state, np.array([1, 0, 0, 1], dtype=complex) / np.sqrt(2))


def test_cnot_control_below_target():
    c = Circuit(3)
    c.add_gate("X", 2, position=0)
    c.add_cnot(control=2, target=0, position=1)
    # |001> -> |101>
    assert np.allclose(c.state, basis_state(5, 3))


def test_add_cnot_validation():
    c = Circuit(1)
    try:
        c.add_cnot(0, 0, 1)
        assert False, "Expected ValueError for CNOT on 1 qubit"
    except ValueError:
        pass

    c = Circuit(2)
    for control, target in [(0, 0), (0, 2), (-1, 1)]:
        try:
            c.add_cnot(control, target, 1)
            assert False, f"Expected ValueError for CNOT({control}, {target})"
        except ValueError:
            pass
    assert c.gates == []


def test_add_gate_rejects_cnot_and_bad_qubit():
    c = Circuit(2)
    for kind, qubit in [("CNOT", 0), ("SWAP", 0), ("H", 2)]:
        try:
            c.add_gate(kind, qubit, 0)
            assert False, f"Expected ValueError for {kind} on {qubit}"
        except ValueError:
            pass
    assert c.gates == []


def test_remove_gate_recompiles():
    c = Circuit(1)
    h = c.add_gate("H", 0, 0)
    c.add_gate("X", 0, 1)
    assert c.remove(h.gate_id)
    assert np.allclose(c.state, basis_state(1, 1))
    assert not c.remove(h.gate_id)


def test_removing_one_cnot_marker_removes_the_pair():
    c = Circuit(2)
    c.add_gate("X", 0, 0)
    ctrl, tgt = c.add_cnot(0, 1, 1)
    assert np.allclose(c.state, basis_state(3, 2))

    c.remove(tgt.gate_id)
    assert [g.kind for g in c.gates] == [GateKind.X]
    assert np.allclose(c.state, basis_state(2, 2))


def test_shrinking_qubit_count_drops_gates_and_orphans():
    c = Circuit(3)
    c.add_gate("X", 0, 0)
    c.add_gate("H", 2, 1)
    c.add_cnot(0, 2, 2)

    c.set_num_qubits(2)
    # H on q2 and the CNOT target marker are gone; the control marker stays but is skipped
    assert [(g.kind, g.qubit) for g in c.gates] == [(GateKind.X, 0), (GateKind.CNOT, 0)]
    assert np.allclose(c.state, basis_state(2, 2))

    c.set_num_qubits(1)
    assert [g.kind for g in c.gates] == [GateKind.X]
    assert np.allclose(c.state, basis_state(1, 1))


def test_growing_qubit_count_replays_on_larger_state():
    c = Circuit(1)
    c.add_gate("X", 0, 0)
    c.set_num_qubits(2)
    assert np.allclose(c.state, basis_state(2, 2))


def test_reset_clears_gates_and_state():
    c = Circuit(2)
    c.add_gate("H", 1, 0)
    c.reset()
    assert c.gates == []
    assert np.allclose(c.state, basis_state(0, 2))


def test_rotation_angle_stored_and_others_ignored():
    c = Circuit(1)
    rx = c.add_gate("RX", 0, 0, angle=math.pi)
    h = c.add_gate("H", 0, 1, angle=1.0)
    assert rx.angle == math.pi
    assert h.angle is None
    assert rx.label == "RX(180°)"


def test_nan_angle_from_upstream_does_not_poison_state():
    c = Circuit(1)
    c.add_gate("RZ", 0, 0, angle=float("nan"))
    assert np.allclose(c.state, basis_state(0, 1))


def test_infinite_angle_from_upstream_does_not_poison_state():
    c = Circuit(1)
    c.add_gate("RX", 0, 0, angle=float("inf"))
    assert np.allclose(c.state, basis_state(0, 1))

    c.add_gate("X", 0, 1)
    assert np.allclose(c.state, basis_state(1, 1))


def test_failed_edit_leaves_circuit_unchanged(monkeypatch):
    c = Circuit(2)
    c.add_gate("H", 0, 0)
    c.add_cnot(0, 1, 1)
    gates = c.gates
    state = c.state.copy()

    def broken(placed, num_qubits):
        raise ValueError("compile failed")

    monkeypatch.setattr("qviz.circuit.compile_circuit", broken)

    edits = [
        lambda: c.add_gate("X", 1, 2),
        lambda: c.add_cnot(1, 0, 3),
        lambda: c.set_num_qubits(3),
        lambda: c.set_num_qubits(1),
        lambda: c.remove(gates[0].gate_id),
        lambda: c.reset(),
    ]
    for edit in edits:
        try:
            edit()
            assert False
        except ValueError:
            pass

        assert c.num_qubits == 2
        assert c.gates == gates
        assert np.allclose(c.state, state)


def test_last_gate_for_qubit():
    c = Circuit(2)
    c.add_gate("H", 0, 0)
    c.add_gate("RX", 0, 2, angle=1.0)
    c.add_gate("Z", 1, 1)
    assert c.last_gate_for_qubit(0).kind == GateKind.RX
    assert c.last_gate_for_qubit(1).kind == GateKind.Z

    c.reset()
    assert c.last_gate_for_qubit(0) is None


def test_describe_prints_terms(capsys):
    c = Circuit(2)
    c.add_gate("H", 0, 0)
    c.add_cnot(0, 1, 1)
    c.describe()
    out = capsys.readouterr().out
    assert "|00⟩" in out
    assert "|11⟩" in out
    assert "|01⟩" not in out
