from __future__ import annotations

import math

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .gates import GateKind


@dataclass(frozen=True)
class SingleQubitOp:
    kind: GateKind
    qubit: int
    angle: Optional[float] = None

    def __post_init__(self):
        kind = GateKind(self.kind)
        if kind.num_qubits != 1:
            raise ValueError(f"{kind.value} is not a single-qubit gate")
        object.__setattr__(self, "kind", kind)

    @property
    def targets(self) -> tuple[int, ...]:
        return (self.qubit,)


@dataclass(frozen=True)
class CNOTOp:
    control: int
    target: int

    kind = GateKind.CNOT

    @property
    def targets(self) -> tuple[int, ...]:
        return (self.control, self.target)


@dataclass(frozen=True)
class SwapOp:
    qubit_a: int
    qubit_b: int

    kind = GateKind.SWAP

    @property
    def targets(self) -> tuple[int, ...]:
        return (self.qubit_a, self.qubit_b)


Operation = Union[SingleQubitOp, CNOTOp, SwapOp]


@dataclass(frozen=True)
class PlacedGate:
    """
    One gate dropped onto a wire.

    position only orders the program; CNOTs are stored as two markers sharing a
    position, one with control=True and one with control=False.
    """
    gate_id: int
    kind: GateKind
    qubit: int
    position: float
    angle: Optional[float] = None
    control: Optional[bool] = None

    def __post_init__(self):
        object.__setattr__(self, "kind", GateKind(self.kind))

    @property
    def label(self) -> str:
        if self.kind.is_rotation and self.angle is not None:
            return f"{self.kind.value}({math.degrees(self.angle):.0f}°)"
        return self.kind.value


def sort_gates(placed: Iterable[PlacedGate]) -> list[PlacedGate]:
    # sorted() is stable: equal positions keep insertion order
    return sorted(placed, key=lambda g: g.position)


def cnot_partner(marker: PlacedGate, ordered: list[PlacedGate], used: set[int]) -> Optional[PlacedGate]:
    """First CNOT marker at the same position that is not `marker` and not yet in `used`."""
    return next(
        (p for p in ordered
         if p.position == marker.position
         and p.gate_id != marker.gate_id
         and p.kind == GateKind.CNOT
         and p.gate_id not in used),
        None,
    )
