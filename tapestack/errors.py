class TuringMachineError(Exception):
    """Base class for every error raised while building or running a machine."""


class TapeBoundExceeded(TuringMachineError, ValueError):
    def __init__(self, side, max_length):
        self.side = side
        self.max_length = max_length
        super().__init__(f"Tape bound exceeded on {side} side (max_length={max_length})")


class InvalidState(TuringMachineError, LookupError):
    def __init__(self, state, num_states):
        self.state = state
        self.num_states = num_states
        super().__init__(f"Illegal state {state}: table has states 1..{num_states}")


class TableFormatError(TuringMachineError, ValueError):
    pass
