import math

from .circuit import Circuit
from .gates import GateKind

MIN_DEGREES = 0.0
MAX_DEGREES = 360.0

# spacing used for instructions without an explicit "@ <position>"
POSITION_STEP = 1.0

FIXED_KINDS = {
    "I": GateKind.I,
    "X": GateKind.X,
    "Y": GateKind.Y,
    "Z": GateKind.Z,
    "H": GateKind.H,
}

ROTATION_KINDS = {
    "RX": GateKind.RX,
    "RY": GateKind.RY,
    "RZ": GateKind.RZ,
}


class AngleError(ValueError):
    pass


def degrees_to_radians(value) -> float:
    """
    Validate a user-supplied angle in degrees and convert it to radians.
    Non-numeric, NaN and out-of-range values raise AngleError; nothing is clamped.
    """
    try:
        degrees = float(value)
    except (TypeError, ValueError):
        raise AngleError(f"angle must be a number of degrees, got {value!r}") from None

    if math.isnan(degrees) or not (MIN_DEGREES <= degrees <= MAX_DEGREES):
        raise AngleError(f"angle must be between {MIN_DEGREES:g} and {MAX_DEGREES:g} degrees, got {value!r}")

    return math.radians(degrees)


def _strip_comment(line: str) -> str:
    return line.split("#", 1)[0].strip()


def _split_position(line: str):
    if "@" not in line:
        return line, None
    head, pos = line.split("@", 1)
    pos = pos.strip()
    try:
        return head.strip(), float(pos)
    except ValueError:
        raise ValueError(f"position must be a number, got {pos!r}") from None


def parse_program(program: str, num_qubits: int, circuit: Circuit | None = None) -> Circuit:
    """
    Build a circuit from a small line-based format.

    Supported instructions:
      - I/X/Y/Z/H <qubit> [@ <position>]
      - RX/RY/RZ <qubit> <degrees> [@ <position>]
      - CNOT <control> <target> [@ <position>]
      - RESET
    Lines without a position are placed after everything placed so far.
    """
    c = circuit if circuit is not None else Circuit(num_qubits)

    if c.num_qubits != num_qubits:
        raise ValueError(f"Provided circuit has num_qubits={c.num_qubits}, but num_qubits={num_qubits} was requested")

    for lineno, raw in enumerate(program.splitlines(), start=1):
        line = _strip_comment(raw)
        if not line:
            continue

        try:
            body, position = _split_position(line)
            parts = body.split()
            if not parts:
                raise ValueError("missing instruction before '@'")
            op = parts[0].upper()
            args = parts[1:]

            if position is None:
                gates = c.gates
                position = (gates[-1].position + POSITION_STEP) if gates else 0.0

            if op in FIXED_KINDS:
                if len(args) != 1:
                    raise ValueError(f"{op} expects 1 arg: {op} <qubit>")
                c.add_gate(FIXED_KINDS[op], int(args[0]), position)
                continue

            if op in ROTATION_KINDS:
                if len(args) != 2:
                    raise ValueError(f"{op} expects 2 args: {op} <qubit> <degrees>")
                angle = degrees_to_radians(args[1])
                c.add_gate(ROTATION_KINDS[op], int(args[0]), position, angle=angle)
                continue

            if op == "CNOT":
                if len(args) != 2:
                    raise ValueError("CNOT expects 2 args: CNOT <control> <target>")
                c.add_cnot(int(args[0]), int(args[1]), position)
                continue

            if op == "RESET":
                c.reset()
                continue

            raise ValueError(f"Unknown instruction: {op}")

        except ValueError as e:
            raise type(e)(f"line {lineno}: {raw.strip()!r}: {e}") from e

    return c
