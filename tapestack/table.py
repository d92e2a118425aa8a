"""State table serialization and validation.

Compact notation puts one state per ``_``-separated field. A transition state
is two commands (read 0, read 1) joined by a comma, each written as
``<write><direction><next state>``, e.g. ``1R2``. An accepting state is the
word ``ACCEPT``.
"""

import json
import os
import re
from pathlib import Path
from typing import List, Sequence

from tapestack.alphabet import ACCEPT, Accept, Command, ControlState, Direction, Symbol, Transition
from tapestack.errors import TableFormatError

ACCEPT_TOKEN = "ACCEPT"
_COMMAND_RE = re.compile(r"^([01])([LRN])(\d+)$")


def _parse_command(token):
    match = _COMMAND_RE.match(token.strip())
    if match is None:
        raise TableFormatError(f"Malformed command {token!r}; expected e.g. '1R2'")
    write, direction, next_state = match.groups()
    return Command(Symbol(int(write)), Direction(direction), int(next_state))


def _format_command(command):
    return f"{command.to_write.value}{command.to_move.value}{command.to_state}"


def parse_table(text: str) -> List[ControlState]:
    states = []
    for field in text.strip().split("_"):
        if field.strip().upper() == ACCEPT_TOKEN:
            states.append(ACCEPT)
            continue
        commands = field.split(",")
        if len(commands) != 2:
            raise TableFormatError(f"State {field!r} must have exactly two commands")
        states.append(Transition(_parse_command(commands[0]), _parse_command(commands[1])))
    return states


def format_table(states: Sequence[ControlState]) -> str:
    fields = []
    for state in states:
        if isinstance(state, Accept):
            fields.append(ACCEPT_TOKEN)
        else:
            fields.append(f"{_format_command(state.on_zero)},{_format_command(state.on_one)}")
    return "_".join(fields)


def _command_from_json(entry):
    if not isinstance(entry, (list, tuple)) or len(entry) != 3:
        raise TableFormatError(f"Command must be [write, direction, next_state], got {entry!r}")
    write, direction, next_state = entry
    try:
        return Command(Symbol(write), Direction(direction), int(next_state))
    except (ValueError, TypeError) as e:
        raise TableFormatError(f"Bad command {entry!r}: {e}") from e


def table_from_json(data) -> List[ControlState]:
    if not isinstance(data, list):
        raise TableFormatError("State table must be a JSON list")
    states = []
    for entry in data:
        if entry == ACCEPT_TOKEN:
            states.append(ACCEPT)
        elif isinstance(entry, dict) and {"on_zero", "on_one"} <= entry.keys():
            states.append(Transition(_command_from_json(entry["on_zero"]), _command_from_json(entry["on_one"])))
        else:
            raise TableFormatError(f"Unrecognised state entry {entry!r}")
    return states


def table_to_json(states: Sequence[ControlState]) -> list:
    data = []
    for state in states:
        if isinstance(state, Accept):
            data.append(ACCEPT_TOKEN)
        else:
            data.append({
                "on_zero": [state.on_zero.to_write.value, state.on_zero.to_move.value, state.on_zero.to_state],
                "on_one": [state.on_one.to_write.value, state.on_one.to_move.value, state.on_one.to_state],
            })
    return data


def validate_table(states: Sequence[ControlState]) -> None:
    """Reject tables whose commands point outside the table.

    The engine only finds a bad target when a run reaches it; this check
    lets a caller fail before starting.
    """
    if not states:
        raise TableFormatError("State table is empty")
    for index, state in enumerate(states, start=1):
        if isinstance(state, Accept):
            continue
        for label, command in (("on_zero", state.on_zero), ("on_one", state.on_one)):
            if not 1 <= command.to_state <= len(states):
                raise TableFormatError(
                    f"State {index} {label} points to state {command.to_state}; "
                    f"table has states 1..{len(states)}"
                )


# A 3-state, 2-symbol busy beaver
BUSY_BEAVER_3 = (
    Transition(
        Command(Symbol.ONE, Direction.RIGHT, 2),
        Command(Symbol.ONE, Direction.LEFT, 3),
    ),
    Transition(
        Command(Symbol.ONE, Direction.LEFT, 1),
        Command(Symbol.ONE, Direction.RIGHT, 2),
    ),
    Transition(
        Command(Symbol.ONE, Direction.LEFT, 2),
        Command(Symbol.ONE, Direction.NEITHER, 4),
    ),
    ACCEPT,
)


def load_table(source: str) -> List[ControlState]:
    """Load a table from a ``.json`` file, a compact-notation file, or a literal string."""
    if not os.path.isfile(source):
        return parse_table(source)
    path = Path(source)
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if path.suffix == ".json":
        try:
            return table_from_json(json.loads(text))
        except json.JSONDecodeError as e:
            raise TableFormatError(f"{path} is not valid JSON: {e}") from e
    return parse_table(text)
