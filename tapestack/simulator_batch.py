import numpy as np
from numba import njit

from tapestack.alphabet import Accept, Direction

# Status codes written by the kernel
RUNNING = 0
HALTED = 1
TAPE_BOUND = 2
INVALID_STATE = 3

STATUS_NAMES = {
    RUNNING: "running",
    HALTED: "halted",
    TAPE_BOUND: "tape_bound_exceeded",
    INVALID_STATE: "invalid_state",
}

MOVE_LEFT = 0
MOVE_RIGHT = 1
MOVE_NEITHER = 2

DIRECTION_CODES = {
    Direction.LEFT: MOVE_LEFT,
    Direction.RIGHT: MOVE_RIGHT,
    Direction.NEITHER: MOVE_NEITHER,
}

# Widest tape a side can have without overflowing int64 on a push
MAX_BATCH_LENGTH = 62


def pack_tables(tables):
    """Lay out state tables as dense arrays, padded to the largest table.

    Returns ``(transitions, accepting, num_states)`` where ``transitions`` has
    shape (machines, states, 2, 3) holding [write, move, next_state] for each
    read symbol.
    """
    num_machines = len(tables)
    width = max((len(table) for table in tables), default=0) or 1

    transitions = np.zeros((num_machines, width, 2, 3), dtype=np.int64)
    accepting = np.zeros((num_machines, width), dtype=np.bool_)
    num_states = np.zeros(num_machines, dtype=np.int64)

    for i, table in enumerate(tables):
        num_states[i] = len(table)
        for j, state in enumerate(table):
            if isinstance(state, Accept):
                accepting[i, j] = True
                continue
            for symbol, command in enumerate((state.on_zero, state.on_one)):
                transitions[i, j, symbol, 0] = command.to_write.value
                transitions[i, j, symbol, 1] = DIRECTION_CODES[command.to_move]
                transitions[i, j, symbol, 2] = command.to_state

    return transitions, accepting, num_states


@njit
def simulate_batch(transitions, accepting, num_states, lefts, rights, states, steps, status, max_steps, max_val):
    """
    Run every machine in the batch on its own two-stack tape.
    Tape and state arrays are updated in place; one status code per machine.
    """
    for idx in range(transitions.shape[0]):
        left = lefts[idx]
        right = rights[idx]
        state = states[idx]
        count = 0
        code = RUNNING

        while True:
            if state < 1 or state > num_states[idx]:
                code = INVALID_STATE
                break
            if accepting[idx, state - 1]:
                code = HALTED
                break
            if count >= max_steps:
                break

            symbol = right & 1
            to_write = transitions[idx, state - 1, symbol, 0]
            to_move = transitions[idx, state - 1, symbol, 1]
            to_state = transitions[idx, state - 1, symbol, 2]

            # Write symbol; committed only if the move succeeds
            if to_write == 1:
                written = right | 1
            else:
                written = right & ~1

            # Move head
            if to_move == MOVE_LEFT:
                if written >= max_val:
                    code = TAPE_BOUND
                    break
                carry = left & 1
                left = left >> 1
                right = (written << 1) | carry
            elif to_move == MOVE_RIGHT:
                if left >= max_val:
                    code = TAPE_BOUND
                    break
                left = (left << 1) | (written & 1)
                right = written >> 1
            else:
                right = written

            state = to_state
            count += 1

        lefts[idx] = left
        rights[idx] = right
        states[idx] = state
        steps[idx] = count
        status[idx] = code
