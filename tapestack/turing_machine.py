from dataclasses import dataclass, replace
from typing import Iterator, Optional, Sequence, Tuple

from tapestack.alphabet import Accept, Command, ControlState, Direction, Symbol
from tapestack.errors import InvalidState, TapeBoundExceeded
from tapestack.tape import MAX_LENGTH, count_ones, decode_to_string, encode_input, max_val


@dataclass(frozen=True)
class Machine:
    """One snapshot of a running machine.

    ``states`` is the state table, initial state first. States are 1-indexed.
    ``left`` is all the tape left of the head. ``right`` is the head cell and
    all the tape right of it, stored reversed so the head is bit 0.
    """

    states: Tuple[ControlState, ...]
    current_state: int = 1
    left: int = 0
    right: int = 0
    max_length: int = MAX_LENGTH

    def __post_init__(self):
        if not isinstance(self.states, tuple):
            object.__setattr__(self, "states", tuple(self.states))

    def set_input(self, symbols: Sequence[Symbol]) -> "Machine":
        return replace(self, right=encode_input(symbols, self.max_length))

    def get_tape(self) -> str:
        return decode_to_string(self.left, self.right, self.max_length)

    @property
    def head_symbol(self) -> Symbol:
        return self._read()

    @property
    def ones(self) -> int:
        return count_ones(self.left, self.right)

    @property
    def is_halted(self) -> bool:
        return isinstance(self._resolve(), Accept)

    def step(self) -> Optional["Machine"]:
        """Apply one transition, or return None once the machine has accepted."""
        state = self._resolve()
        if isinstance(state, Accept):
            return None
        return self._run_command(state.command_for(self._read()))

    def _resolve(self) -> ControlState:
        # states use 1-based indexing
        if not 1 <= self.current_state <= len(self.states):
            raise InvalidState(self.current_state, len(self.states))
        return self.states[self.current_state - 1]

    def _run_command(self, command: Command) -> "Machine":
        return self._write(command.to_write)._move(command.to_move)._change_state(command.to_state)

    def _read(self) -> Symbol:
        return Symbol.ZERO if (self.right & 1) == 0 else Symbol.ONE

    def _write(self, symbol: Symbol) -> "Machine":
        if symbol is Symbol.ZERO:
            return replace(self, right=self.right & ~1)
        return replace(self, right=self.right | 1)

    # this is the direction to move the head, not to move the tape
    def _move(self, direction: Direction) -> "Machine":
        bound = max_val(self.max_length)
        if direction is Direction.LEFT:
            if self.right >= bound:
                raise TapeBoundExceeded("right", self.max_length)
            return replace(self, left=self.left >> 1, right=(self.right << 1) | (self.left & 1))
        if direction is Direction.RIGHT:
            if self.left >= bound:
                raise TapeBoundExceeded("left", self.max_length)
            return replace(self, left=(self.left << 1) | (self.right & 1), right=self.right >> 1)
        return self

    def _change_state(self, new_state: int) -> "Machine":
        return replace(self, current_state=new_state)


def run(machine: Machine) -> Iterator[Machine]:
    """Yield ``machine`` and every snapshot after it until the machine accepts.

    Never ends for a machine that does not halt; callers cap the iteration.
    """
    current = machine
    while current is not None:
        yield current
        current = current.step()
