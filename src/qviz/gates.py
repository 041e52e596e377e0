from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np


class GateKind(str, Enum):
    I = "I"
    H = "H"
    X = "X"
    Y = "Y"
    Z = "Z"
    RX = "RX"
    RY = "RY"
    RZ = "RZ"
    CNOT = "CNOT"
    SWAP = "SWAP"

    @property
    def is_rotation(self) -> bool:
        return self in (GateKind.RX, GateKind.RY, GateKind.RZ)

    @property
    def num_qubits(self) -> int:
        return 2 if self in (GateKind.CNOT, GateKind.SWAP) else 1


# 45 degrees, the angle pre-filled by the front end
DEFAULT_ROTATION = np.pi / 4


## 1 qubit gates

I = np.array([
    [1, 0],
    [0, 1],
], dtype=complex)

X = np.array([
    [0, 1],
    [1, 0],
], dtype=complex)

Y = np.array([
    [0, -1j],
    [1j, 0],
], dtype=complex)

Z = np.array([
    [1, 0],
    [0, -1],
], dtype=complex)

H = (1 / np.sqrt(2)) * np.array([
    [1, 1],
    [1, -1],
], dtype=complex)


def RZ(theta: float) -> np.ndarray:
    """
    RZ(theta) = exp(-i theta Z/2) =
    [[e^{-iθ/2}, 0],
     [0, e^{+iθ/2}]]
    """
    t = float(theta) / 2.0
    return np.array([
        [np.exp(-1j * t), 0.0],
        [0.0, np.exp(1j * t)],
    ], dtype=complex)


def RY(theta: float) -> np.ndarray:
    """
    RY(theta) = exp(-i theta Y/2) =
    [[cos(θ/2), -sin(θ/2)],
     [sin(θ/2),  cos(θ/2)]]
    """
    t = float(theta) / 2.0
    c = np.cos(t)
    s = np.sin(t)
    return np.array([
        [c, -s],
        [s,  c],
    ], dtype=complex)


def RX(theta: float) -> np.ndarray:
    """
    RX(theta) = exp(-i theta X/2) =
    [[cos(θ/2), -i sin(θ/2)],
     [-i sin(θ/2), cos(θ/2)]]
    """
    t = float(theta) / 2.0
    c = np.cos(t)
    s = np.sin(t)
    return np.array([
        [c, -1j * s],
        [-1j * s, c],
    ], dtype=complex)


## 2 qubit gates
## control is the first (more significant) qubit of the pair

CNOT = np.array([
    [1,0,0,0],
    [0,1,0,0],
    [0,0,0,1],
    [0,0,1,0],
], dtype=complex)

SWAP = np.array([
    [1,0,0,0],
    [0,0,1,0],
    [0,1,0,0],
    [0,0,0,1],
], dtype=complex)


FIXED_GATES = {
    GateKind.I: I,
    GateKind.H: H,
    GateKind.X: X,
    GateKind.Y: Y,
    GateKind.Z: Z,
    GateKind.CNOT: CNOT,
    GateKind.SWAP: SWAP,
}

ROTATION_GATES = {
    GateKind.RX: RX,
    GateKind.RY: RY,
    GateKind.RZ: RZ,
}


def gate_matrix(kind, angle: Optional[float] = None) -> np.ndarray:
    """
    Look up the unitary for a gate kind. Rotations are built from `angle`
    (radians, DEFAULT_ROTATION when omitted). Unknown kinds raise ValueError.
    """
    kind = GateKind(kind)

    if kind in ROTATION_GATES:
        if angle is None:
            angle = DEFAULT_ROTATION
        return ROTATION_GATES[kind](angle)

    return FIXED_GATES[kind].copy()
