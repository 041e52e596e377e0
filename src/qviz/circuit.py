from __future__ import annotations

import logging
from typing import Iterable, Optional

import numpy as np

from .bloch import bloch_angles
from .gates import GateKind
from .notation import render_qubit, render_state, state_details
from .operations import CNOTOp, Operation, PlacedGate, SingleQubitOp, cnot_partner, sort_gates
from .simulator import run_statevector
from .state import basis_label, check_num_qubits, zero_state

logger = logging.getLogger(__name__)


def compile_program(placed: Iterable[PlacedGate], num_qubits: int) -> list[Operation]:
    """
    Turn placed gates into the ordered operation list.

    CNOT markers are matched with the first unused CNOT marker sharing their
    position. A marker with no partner (or whose partner sits on the same wire)
    is dropped: the circuit is mid-edit and the marker is treated as a no-op.
    """
    check_num_qubits(num_qubits)

    ordered = sort_gates(placed)
    used: set[int] = set()
    ops: list[Operation] = []

    for g in ordered:
        if g.gate_id in used:
            continue

        if g.kind == GateKind.CNOT:
            pair = cnot_partner(g, ordered, used)
            if pair is None:
                logger.debug("skipping unpaired CNOT marker %d at position %s", g.gate_id, g.position)
                continue

            used.add(g.gate_id)
            used.add(pair.gate_id)

            control = g.qubit if g.control else pair.qubit
            target = pair.qubit if g.control else g.qubit
            if control == target:
                logger.debug("skipping CNOT at position %s with control == target", g.position)
                continue

            ops.append(CNOTOp(control=control, target=target))
            continue

        used.add(g.gate_id)
        ops.append(SingleQubitOp(kind=g.kind, qubit=g.qubit, angle=g.angle))

    return ops


def compile_circuit(placed: Iterable[PlacedGate], num_qubits: int) -> np.ndarray:
    """Replay the whole program from |0...0> and return the final state."""
    return run_statevector(compile_program(placed, num_qubits), num_qubits)


class Circuit:
    """
    One editable circuit: its wires, its placed gates and the state they produce.

    Every edit recompiles the full program from |0...0> before returning, so
    `state` always matches `gates`.
    """

    def __init__(self, num_qubits: int = 1):
        check_num_qubits(num_qubits)

        self.num_qubits = num_qubits
        self._gates: list[PlacedGate] = []
        self._next_id = 0
        self.state = zero_state(num_qubits)


    @property
    def gates(self) -> list[PlacedGate]:
        return sort_gates(self._gates)

    def _new_id(self) -> int:
        gate_id = self._next_id
        self._next_id += 1
        return gate_id

    def _check_qubit(self, qubit: int, name: str = "qubit") -> None:
        if not (0 <= qubit < self.num_qubits):
            raise ValueError(f"{name} must be in [0, {self.num_qubits - 1}], got {qubit}")

    def _commit(self, gates: list[PlacedGate], num_qubits: int) -> np.ndarray:
        # compile before assigning so a failed edit leaves gates, wires and state as they were
        state = compile_circuit(gates, num_qubits)
        self._gates = gates
        self.num_qubits = num_qubits
        self.state = state
        return state

    def recompile(self) -> np.ndarray:
        return self._commit(list(self._gates), self.num_qubits)


    def add_gate(self, kind, qubit: int, position: float, angle: Optional[float] = None) -> PlacedGate:
        kind = GateKind(kind)
        if kind == GateKind.CNOT:
            raise ValueError("use add_cnot() to place a CNOT")
        if kind.num_qubits != 1:
            raise ValueError(f"{kind.value} cannot be placed on a single wire")
        self._check_qubit(qubit)

        gate = PlacedGate(
            gate_id=self._new_id(),
            kind=kind,
            qubit=qubit,
            position=float(position),
            angle=angle if kind.is_rotation else None,
        )
        self._commit(self._gates + [gate], self.num_qubits)
        return gate


    def add_cnot(self, control: int, target: int, position: float) -> tuple[PlacedGate, PlacedGate]:
        if self.num_qubits < 2:
            raise ValueError("CNOT requires at least 2 qubits")
        if control == target:
            raise ValueError("control and target must be different")
        self._check_qubit(control, "control")
        self._check_qubit(target, "target")

        position = float(position)
        ctrl = PlacedGate(self._new_id(), GateKind.CNOT, control, position, control=True)
        tgt = PlacedGate(self._new_id(), GateKind.CNOT, target, position, control=False)
        self._commit(self._gates + [ctrl, tgt], self.num_qubits)
        return ctrl, tgt


    def remove(self, gate_id: int) -> bool:
        """Remove a gate; removing either CNOT marker removes every CNOT at that position."""
        gate = next((g for g in self._gates if g.gate_id == gate_id), None)
        if gate is None:
            return False

        if gate.kind == GateKind.CNOT:
            kept = [
                g for g in self._gates
                if not (g.kind == GateKind.CNOT and g.position == gate.position)
            ]
        else:
            kept = [g for g in self._gates if g.gate_id != gate_id]

        self._commit(kept, self.num_qubits)
        return True


    def set_num_qubits(self, num_qubits: int) -> None:
        check_num_qubits(num_qubits)

        if num_qubits == 1:
            kept = [g for g in self._gates if g.kind != GateKind.CNOT]
        else:
            # may orphan one CNOT marker; compile skips it
            kept = [g for g in self._gates if g.qubit < num_qubits]

        previous = self.num_qubits
        self._commit(kept, num_qubits)
        logger.info("qubit count changed from %d to %d", previous, num_qubits)


    def reset(self) -> None:
        self._commit([], self.num_qubits)
        logger.info("circuit reset to |%s>", "0" * self.num_qubits)


    def last_gate_for_qubit(self, qubit: int) -> Optional[PlacedGate]:
        for g in reversed(self.gates):
            if g.qubit == qubit:
                return g
        return None

    def bloch_angles(self, qubit: int) -> tuple[float, float]:
        self._check_qubit(qubit)
        return bloch_angles(self.state, qubit, self.num_qubits)

    def all_bloch_angles(self) -> list[tuple[float, float]]:
        return [bloch_angles(self.state, q, self.num_qubits) for q in range(self.num_qubits)]

    def render(self) -> str:
        return render_state(self.state, self.num_qubits)

    def render_qubit(self, qubit: int) -> str:
        return render_qubit(*self.bloch_angles(qubit))

    def details(self) -> str:
        return state_details(self._gates, self.state, self.num_qubits)

    def probs(self) -> np.ndarray:
        return np.abs(self.state) ** 2


    def describe(self, tol: float = 1e-12, max_terms: int | None = 32):
        """
        Print the non-zero amplitudes, largest probability first.
          tol: ignore amplitudes with |amp| < tol
          max terms: limit number of printed terms (None for no limit)
        """
        terms = []
        for i, amp in enumerate(self.state):
            if abs(amp) < tol:
                continue
            terms.append((amp, abs(amp) ** 2, basis_label(i, self.num_qubits)))

        terms.sort(key=lambda t: t[1], reverse=True)

        if max_terms is not None:
            terms = terms[:max_terms]

        print(f"{self.num_qubits}-qubit state |ψ⟩ with {len(terms)} shown term(s):")
        for amp, prob, ket in terms:
            a = complex(amp)
            print(f"  {a.real:+.6f}{a.imag:+.6f}j  |{ket}⟩   P={prob:.6f}")


    def __repr__(self):
        return f"Circuit(num_qubits={self.num_qubits}, gates={len(self._gates)})"
