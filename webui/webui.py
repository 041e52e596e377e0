import time

import numpy as np
import streamlit as st

from qviz.animation import ANIMATION_DURATION, ArrowAnimation
from qviz.circuit import Circuit
from qviz.gates import GateKind
from qviz.notation import format_state_vector, qubit_calculation
from qviz.parser import AngleError, degrees_to_radians, parse_program
from qviz.state import MAX_QUBITS
from qviz.viz import plot_bloch_spheres, plot_statevector_probs


st.set_page_config(page_title="Qubit Visualizer", layout="wide")

st.title("Qubit Visualizer")
st.caption("Place gates on qubit wires • Bloch spheres • State notation")


def _circuit() -> Circuit:
    if "circuit" not in st.session_state:
        st.session_state["circuit"] = Circuit(1)
    return st.session_state["circuit"]


def _next_position(c: Circuit) -> float:
    gates = c.gates
    return gates[-1].position + 1.0 if gates else 0.0


c = _circuit()


# -----------------------
# Sidebar controls
# -----------------------
with st.sidebar:
    st.header("Circuit")

    num_qubits = st.slider("Number of qubits", min_value=1, max_value=MAX_QUBITS, value=c.num_qubits, step=1)
    if int(num_qubits) != c.num_qubits:
        c.set_num_qubits(int(num_qubits))

    if st.button("Reset"):
        c.reset()
        st.session_state.pop("drawn_angles", None)

    st.divider()
    st.header("UI")
    show_details = st.checkbox("Show detailed calculation", value=True)
    show_bloch = st.checkbox("Show Bloch spheres", value=True)
    animate = st.checkbox("Animate arrows", value=False)
    show_probs = st.checkbox("Show probabilities", value=False)


# -----------------------
# Gate placement
# -----------------------
st.markdown("## Place a gate")

kinds = [k.value for k in GateKind if k != GateKind.SWAP]
col1, col2, col3, col4 = st.columns([1, 1, 1, 1])
with col1:
    kind = GateKind(st.selectbox("Gate", kinds, index=kinds.index("H")))
with col2:
    qubit = st.number_input("Qubit" if kind != GateKind.CNOT else "Control qubit",
                            min_value=0, max_value=c.num_qubits - 1, value=0, step=1)
with col3:
    position = st.number_input("Position", value=float(_next_position(c)), step=1.0)
with col4:
    if kind.is_rotation:
        degrees = st.text_input("θ (degrees, 0–360)", value="45")
    elif kind == GateKind.CNOT:
        target = st.number_input("Target qubit", min_value=0, max_value=c.num_qubits - 1,
                                 value=1 if c.num_qubits > 1 else 0, step=1)

if st.button("Add gate", type="primary"):
    try:
        if kind == GateKind.CNOT:
            c.add_cnot(int(qubit), int(target), float(position))
        elif kind.is_rotation:
            c.add_gate(kind, int(qubit), float(position), angle=degrees_to_radians(degrees))
        else:
            c.add_gate(kind, int(qubit), float(position))
    except AngleError as e:
        st.error(f"Invalid angle: {e}")
    except ValueError as e:
        st.error(str(e))


with st.expander("Load a circuit from text", expanded=False):
    st.caption("One instruction per line: `H 0 @ 1`, `RX 1 90 @ 2`, `CNOT 0 1 @ 3`, `RESET`.")
    program = st.text_area("Program", value="H 0\nCNOT 0 1\n", height=140)
    if st.button("Load program"):
        try:
            st.session_state["circuit"] = parse_program(program, c.num_qubits)
            c = st.session_state["circuit"]
        except ValueError as e:
            st.error(f"Program rejected: {e}")


st.markdown("## Gates")
gates = c.gates
if not gates:
    st.info("No gates placed yet.")
for g in gates:
    gcol1, gcol2 = st.columns([4, 1])
    with gcol1:
        role = ""
        if g.kind == GateKind.CNOT:
            role = " (control)" if g.control else " (target)"
        st.text(f"@{g.position:g}  q{g.qubit}: {g.label}{role}")
    with gcol2:
        if st.button("Remove", key=f"remove_{g.gate_id}"):
            c.remove(g.gate_id)
            st.rerun()


# -----------------------
# Results
# -----------------------
st.divider()
st.markdown("## State")

st.markdown(f"**{c.render()}**")
st.code(format_state_vector(c.state, c.num_qubits))

if show_details:
    with st.expander("Detailed calculation", expanded=False):
        st.text(c.details())
        for q, (theta, phi) in enumerate(c.all_bloch_angles()):
            st.text(f"q{q}:\n{qubit_calculation(theta, phi)}")

if show_bloch:
    targets = c.all_bloch_angles()
    labels = [f"q{q}: {c.render_qubit(q)}" for q in range(c.num_qubits)]
    drawn = st.session_state.get("drawn_angles")

    if animate and drawn is not None and len(drawn) == len(targets) and drawn != targets:
        last_kinds = []
        for q in range(c.num_qubits):
            last = c.last_gate_for_qubit(q)
            last_kinds.append(last.kind if last is not None else None)

        anim = ArrowAnimation(starts=drawn, targets=targets, last_kinds=last_kinds)
        placeholder = st.empty()
        frames = 12
        for _ in range(frames):
            fig = plot_bloch_spheres(anim.frame(), labels=labels)
            placeholder.pyplot(fig, clear_figure=True)
            if anim.done():
                break
            time.sleep(ANIMATION_DURATION / frames)
        placeholder.pyplot(plot_bloch_spheres(targets, labels=labels), clear_figure=True)
    else:
        st.pyplot(plot_bloch_spheres(targets, labels=labels), clear_figure=True)

    st.session_state["drawn_angles"] = targets

if show_probs:
    st.pyplot(plot_statevector_probs(c.state, c.num_qubits), clear_figure=True)
    st.caption(f"Norm: {float(np.linalg.norm(c.state)):.6f}")
