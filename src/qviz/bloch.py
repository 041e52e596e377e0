from __future__ import annotations

import logging
import math
from typing import Tuple

import numpy as np

from .state import validate_state

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


def _bit_is_one(index: int, qubit: int, num_qubits: int) -> bool:
    shift = (num_qubits - 1) - qubit
    return ((index >> shift) & 1) == 1


def reduced_amplitudes(state, qubit: int, num_qubits: int) -> Tuple[complex, complex]:
    """
    Collapse the joint state onto one qubit as (alpha, beta).

    Raw amplitudes are summed into the bit=0 and bit=1 buckets (phases kept),
    then rescaled to unit length. For entangled states this is a projection,
    not the reduced density matrix. Returns (0, 0) when both buckets cancel.
    """
    validate_state(state, num_qubits)
    if qubit < 0 or qubit >= num_qubits:
        raise ValueError("qubit out of range")

    psi = np.asarray(state, dtype=complex)

    if num_qubits == 1:
        alpha, beta = complex(psi[0]), complex(psi[1])
    else:
        alpha = 0j
        beta = 0j
        for i in range(len(psi)):
            if _bit_is_one(i, qubit, num_qubits):
                beta += psi[i]
            else:
                alpha += psi[i]

    norm = math.sqrt(abs(alpha) ** 2 + abs(beta) ** 2)
    if norm == 0.0:
        logger.debug("qubit %d buckets cancel to zero, no Bloch direction", qubit)
        return 0j, 0j

    return alpha / norm, beta / norm


def bloch_angles_raw(state, qubit: int, num_qubits: int) -> Tuple[float, float]:
    """(theta, phi) with phi = arg(beta) - arg(alpha), not wrapped."""
    alpha, beta = reduced_amplitudes(state, qubit, num_qubits)

    if alpha == 0 and beta == 0:
        return 0.0, 0.0

    theta = 2.0 * math.acos(min(1.0, abs(alpha)))

    if alpha == 0:
        # arg(alpha) undefined
        phi = 0.0
    else:
        phi = math.atan2(beta.imag, beta.real) - math.atan2(alpha.imag, alpha.real)

    return theta, phi


def wrap_phase(phi: float) -> float:
    """Map phi into [0, 2*pi)."""
    wrapped = phi % TWO_PI
    # -1e-17 % 2pi rounds up to exactly 2pi
    if wrapped >= TWO_PI:
        wrapped = 0.0
    return wrapped


def bloch_angles(state, qubit: int, num_qubits: int) -> Tuple[float, float]:
    theta, phi = bloch_angles_raw(state, qubit, num_qubits)

    if math.isnan(theta):
        logger.debug("NaN theta for qubit %d replaced with 0", qubit)
        theta = 0.0
    if math.isnan(phi):
        logger.debug("NaN phi for qubit %d replaced with 0", qubit)
        phi = 0.0

    return theta, wrap_phase(phi)


def state_from_angles(theta: float, phi: float) -> np.ndarray:
    """cos(θ/2)|0> + e^{iφ} sin(θ/2)|1>"""
    return np.array([
        math.cos(theta / 2.0),
        np.exp(1j * phi) * math.sin(theta / 2.0),
    ], dtype=complex)


def bloch_vector_from_angles(theta: float, phi: float) -> np.ndarray:
    return np.array([
        math.sin(theta) * math.cos(phi),
        math.sin(theta) * math.sin(phi),
        math.cos(theta),
    ], dtype=float)


def bloch_vector_from_state(state_1q: np.ndarray) -> np.ndarray:

    state_1q = np.asarray(state_1q, dtype=complex).reshape(-1)
    if state_1q.shape[0] != 2:
        raise ValueError("bloch_vector_from_state expects a 1-qubit statevector of length 2")

    alpha, beta = state_1q[0], state_1q[1]

    x = 2.0 * np.real(np.conjugate(alpha) * beta)
    y = 2.0 * np.imag(np.conjugate(alpha) * beta)
    z = (np.abs(alpha) ** 2) - (np.abs(beta) ** 2)

    return np.array([x, y, z], dtype=float)
