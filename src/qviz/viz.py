import numpy as np
import matplotlib.pyplot as plt

from .bloch import bloch_vector_from_angles
from .notation import render_qubit
from .state import basis_label


def plot_statevector_probs(state: np.ndarray, num_qubits: int, *, title: str = "Statevector probabilities"):

    state = np.asarray(state, dtype=complex)
    probs = np.abs(state) ** 2
    labels = [basis_label(i, num_qubits) for i in range(len(probs))]

    fig = plt.figure()
    plt.bar(range(len(probs)), probs)
    plt.xticks(range(len(probs)), labels, rotation=90)
    plt.ylabel("Probability")
    plt.title(title)
    plt.tight_layout()
    return fig


def draw_bloch_sphere(ax, theta: float, phi: float, *, title: str = "bloch sphere"):

    x, y, z = bloch_vector_from_angles(theta, phi).tolist()

    u = np.linspace(0, 2*np.pi, 60)
    t = np.linspace(0, np.pi, 60)
    xs = np.outer(np.cos(u), np.sin(t))
    ys = np.outer(np.sin(u), np.sin(t))
    zs = np.outer(np.ones_like(u), np.cos(t))
    ax.plot_surface(xs, ys, zs, alpha=0.15, linewidth=0)

    ax.plot([-1, 1], [0, 0], [0, 0])
    ax.plot([0, 0], [-1, 1], [0, 0])
    ax.plot([0, 0], [0, 0], [-1, 1])
    ax.text(0, 0, 1.15, "|0⟩")
    ax.text(0, 0, -1.25, "|1⟩")

    ax.quiver(0, 0, 0, x, y, z, length=1.0, normalize=False, color="purple")

    ax.set_xlim([-1, 1]); ax.set_ylim([-1, 1]); ax.set_zlim([-1, 1])
    ax.set_xlabel("X"); ax.set_ylabel("Y"); ax.set_zlabel("Z")
    ax.set_title(title)
    return ax


def plot_bloch_sphere(theta: float, phi: float, *, title: str = "bloch sphere"):

    fig = plt.figure()
    ax = fig.add_subplot(111, projection="3d")
    draw_bloch_sphere(ax, theta, phi, title=title)
    plt.tight_layout()
    return fig


def plot_bloch_spheres(angles, *, labels=None):
    """One sphere per qubit, side by side. `angles` is a list of (theta, phi)."""
    if not angles:
        raise ValueError("angles is empty")

    n = len(angles)
    fig = plt.figure(figsize=(3.2 * n, 3.6))
    for q, (theta, phi) in enumerate(angles):
        ax = fig.add_subplot(1, n, q + 1, projection="3d")
        title = labels[q] if labels is not None else f"q{q}: {render_qubit(theta, phi)}"
        draw_bloch_sphere(ax, theta, phi, title=title)
    plt.tight_layout()
    return fig


def plot_circuit_bloch_spheres(circuit):
    return plot_bloch_spheres(circuit.all_bloch_angles())
