"""
Text forms of a quantum state.

Per-qubit (theta, phi) pairs become closed symbolic kets where the angles are
recognisable, a product of such kets becomes a joint basis ket or a tensor
product, and the raw state vector can be listed amplitude by amplitude.
"""
from __future__ import annotations

import math
from typing import Iterable, Sequence, Tuple

import numpy as np

from .bloch import bloch_angles, wrap_phase
from .gates import GateKind
from .operations import PlacedGate, cnot_partner, sort_gates
from .state import basis_label

TOL = 1e-6
DECIMALS = 3

TWO_PI = 2.0 * math.pi

KET_0 = "|0⟩"
KET_1 = "|1⟩"
EQUAL_SUPERPOSITION = "1/√2 (|0⟩ + |1⟩)"

# theta = pi/2 states, keyed by phi
_EQUATOR_STATES = (
    (0.0, EQUAL_SUPERPOSITION),
    (math.pi, "1/√2 (|0⟩ - |1⟩)"),
    (math.pi / 2, "1/√2 (|0⟩ + i|1⟩)"),
    (3 * math.pi / 2, "1/√2 (|0⟩ - i|1⟩)"),
)


def _close(a: float, b: float, tol: float = TOL) -> bool:
    return abs(a - b) < tol


def format_amplitude(value: float) -> str:
    """Symbolic form for 1, 1/√2, 1/2 and √3/2, otherwise two decimals."""
    if _close(value, 1.0):
        return ""
    if _close(value * value, 0.5):
        return "1/√2 "
    if _close(value, 0.5):
        return "1/2 "
    if _close(value, math.sqrt(3) / 2):
        return "√3/2 "
    return f"{value:.2f}"


def render_qubit(theta: float, phi: float) -> str:
    """
    Symbolic ket for a single qubit at Bloch angles (theta, phi).

    >>> render_qubit(0.0, 0.0)
    '|0⟩'
    >>> render_qubit(math.pi / 2, math.pi)
    '1/√2 (|0⟩ - |1⟩)'
    """
    phi = wrap_phase(phi)
    if _close(phi, TWO_PI):
        phi = 0.0

    # the phase of a lone |0> or |1> is global and not shown
    if _close(theta, 0.0):
        return KET_0
    if _close(theta, math.pi):
        return KET_1

    if _close(theta, math.pi / 2):
        for target, text in _EQUATOR_STATES:
            if _close(phi, target):
                return text

    alpha = format_amplitude(math.cos(theta / 2))
    beta = format_amplitude(math.sin(theta / 2))

    sign = "+"
    if _close(phi, math.pi / 2):
        beta = f"i{beta}"
    elif _close(phi, 3 * math.pi / 2):
        sign = "-"
        beta = f"i{beta}"
    elif _close(phi, math.pi):
        sign = "-"
    elif not _close(phi, 0.0):
        beta = f"e^(i{phi:.2f}) {beta}"

    return f"({alpha}|0⟩ {sign} {beta}|1⟩)"


def _uniform_amplitude(num_qubits: int) -> str:
    dim = 2 ** num_qubits
    if num_qubits % 2 == 0:
        return f"1/{2 ** (num_qubits // 2)}"
    return f"1/√{dim}"


def concise_notation(text: str) -> str:
    """
    Expand a product of equal superpositions into the uniform sum over all
    basis kets, e.g. two factors become '1/2 (|00⟩ + |01⟩ + |10⟩ + |11⟩)'.
    Anything else is returned unchanged.
    """
    parts = [p.strip() for p in text.split("⊗")]
    if not all(p == EQUAL_SUPERPOSITION for p in parts):
        return text

    n = len(parts)
    kets = " + ".join(f"|{basis_label(i, n)}⟩" for i in range(2 ** n))
    return f"{_uniform_amplitude(n)} ({kets})"


def render_product(angles: Sequence[Tuple[float, float]]) -> str:
    factors = [render_qubit(theta, phi) for theta, phi in angles]
    if not factors:
        raise ValueError("need at least one qubit")

    if all(f in (KET_0, KET_1) for f in factors):
        bits = "".join("0" if f == KET_0 else "1" for f in factors)
        return f"|{bits}⟩"

    if len(factors) > 1:
        return concise_notation(" ⊗ ".join(factors))

    return factors[0]


def render_state(state, num_qubits: int) -> str:
    """Per-qubit projection of `state` written as a joint ket or tensor product."""
    angles = [bloch_angles(state, q, num_qubits) for q in range(num_qubits)]
    return render_product(angles)


def format_complex(z: complex) -> str:
    re = float(np.real(z))
    im = float(np.imag(z))

    if abs(im) < TOL:
        return f"{re:.{DECIMALS}f}"
    if abs(re) < TOL:
        return f"{im:.{DECIMALS}f}i"

    sign = "+" if im >= 0 else "-"
    return f"{re:.{DECIMALS}f} {sign} {abs(im):.{DECIMALS}f}i"


def format_state_vector(state, num_qubits: int) -> str:
    terms = []
    for i, amp in enumerate(np.asarray(state, dtype=complex)):
        if abs(amp) < TOL:
            continue
        terms.append(f"({format_complex(amp)})|{basis_label(i, num_qubits)}⟩")

    if not terms:
        return "|ψ⟩ = 0"
    return "|ψ⟩ = " + " + ".join(terms)


def qubit_calculation(theta: float, phi: float) -> str:
    alpha = math.cos(theta / 2)
    beta = math.sin(theta / 2) * complex(math.cos(phi), math.sin(phi))

    return "\n".join([
        f"|ψ⟩ = {format_complex(alpha)}|0⟩ + {format_complex(beta)}|1⟩",
        f"θ = {theta:.3f} rad ({math.degrees(theta):.1f}°)",
        f"φ = {phi:.3f} rad ({math.degrees(phi):.1f}°)",
    ])


def state_details(placed: Iterable[PlacedGate], state, num_qubits: int) -> str:
    """Step-by-step summary: initial product state, gates per wire, CNOTs, final vector."""
    ordered = sort_gates(placed)
    used: set[int] = set()

    wires: list[list[str]] = [[] for _ in range(num_qubits)]
    cnots = []
    for g in ordered:
        if g.kind == GateKind.CNOT:
            if g.gate_id in used:
                continue
            partner = cnot_partner(g, ordered, used)
            if partner is None:
                continue
            used.add(g.gate_id)
            used.add(partner.gate_id)

            control = g.qubit if g.control else partner.qubit
            target = partner.qubit if g.control else g.qubit
            if control != target:
                cnots.append(f"CNOT(control: q{control}, target: q{target})")
        elif g.qubit < num_qubits:
            wires[g.qubit].insert(0, g.label)

    terms = [" × ".join(w) if w else "I" for w in wires]

    lines = [
        "Initial Qubit State:",
        " ⊗ ".join(["[1, 0]"] * num_qubits),
        "",
        "Gate Operations (Right-to-Left):",
        f"({' ⊗ '.join(terms)}) · |ψ₀⟩",
        "",
    ]
    if cnots:
        lines.append("CNOT Gates:")
        lines.extend(cnots)
        lines.append("")

    lines.append("Final State Vector:")
    lines.append(format_state_vector(state, num_qubits))
    return "\n".join(lines)
