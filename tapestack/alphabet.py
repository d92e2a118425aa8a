from dataclasses import dataclass
from enum import Enum
from typing import Union


class Symbol(Enum):
    ZERO = 0
    ONE = 1


class Direction(Enum):
    """Direction the head moves, not the tape."""
    LEFT = "L"
    RIGHT = "R"
    NEITHER = "N"


@dataclass(frozen=True)
class Command:
    to_write: Symbol
    to_move: Direction
    to_state: int


@dataclass(frozen=True)
class Transition:
    on_zero: Command
    on_one: Command

    def command_for(self, symbol: Symbol) -> Command:
        return self.on_zero if symbol is Symbol.ZERO else self.on_one


@dataclass(frozen=True)
class Accept:
    pass


ACCEPT = Accept()

ControlState = Union[Transition, Accept]
