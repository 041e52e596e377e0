import numpy as np

MAX_QUBITS = 6


def check_num_qubits(num_qubits: int) -> None:
	if num_qubits < 1 or num_qubits > MAX_QUBITS:
		raise ValueError(f"num_qubits must be between 1 and {MAX_QUBITS}, got {num_qubits}")

def basis_state(index: int, num_qubits: int) -> np.ndarray:
	check_num_qubits(num_qubits)
	dim = 2 ** num_qubits
	if index < 0 or index >= dim:
		raise ValueError(f"index must be between 0 and {dim-1}")

	state = np.zeros(dim, dtype=complex)
	state[index] = 1.0
	return state

def zero_state(num_qubits: int) -> np.ndarray:
	return basis_state(0, num_qubits)

def validate_state(state, num_qubits: int) -> None:
	state = np.asarray(state)
	if state.ndim != 1 or state.shape[0] != 2 ** num_qubits:
		raise ValueError(f"state must have shape ({2 ** num_qubits},), got {state.shape}")

def copy_state(state) -> np.ndarray:
	return np.array(state, dtype=complex, copy=True)

def norm_squared(state) -> float:
	state = np.asarray(state, dtype=complex)
	return float(np.sum(state.real * state.real + state.imag * state.imag))

def basis_label(index: int, num_qubits: int) -> str:
	return format(index, f"0{num_qubits}b")
