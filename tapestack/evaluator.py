from dataclasses import dataclass
from itertools import islice

import numpy as np

from tapestack.errors import InvalidState, TapeBoundExceeded
from tapestack.simulator_batch import (
    HALTED, INVALID_STATE, MAX_BATCH_LENGTH, RUNNING, STATUS_NAMES, TAPE_BOUND, pack_tables, simulate_batch,
)
from tapestack.tape import count_ones, max_val
from tapestack.turing_machine import Machine, run


@dataclass(frozen=True)
class Evaluation:
    steps: int
    halted: bool
    ones: int
    machine: Machine

    def to_dict(self):
        return {"steps_taken": self.steps, "halted": self.halted, "ones": self.ones}


def evaluate(machine: Machine, max_steps: int) -> Evaluation:
    """Run ``machine`` for at most ``max_steps`` transitions.

    A machine sitting in an accepting state once the cap is reached counts as
    halted. Tape and state errors propagate.
    """
    steps = 0
    last = machine
    for steps, last in enumerate(islice(run(machine), max_steps + 1)):
        pass
    return Evaluation(steps=steps, halted=last.is_halted, ones=last.ones, machine=last)


def _record(steps, code, state, left, right):
    return {
        "steps_taken": steps,
        "halted": code == HALTED,
        "ones": count_ones(left, right),
        "status": STATUS_NAMES[code],
        "state": state,
        "left": left,
        "right": right,
    }


def evaluate_record(machine: Machine, max_steps: int) -> dict:
    """Like ``evaluate``, but report tape and state errors as a status instead of raising.

    ``steps_taken`` counts the transitions completed before the run stopped.
    """
    steps = 0
    last = machine
    try:
        for steps, last in enumerate(islice(run(machine), max_steps + 1)):
            pass
        code = HALTED if last.is_halted else RUNNING
    except TapeBoundExceeded:
        code = TAPE_BOUND
    except InvalidState:
        code = INVALID_STATE
    return _record(steps, code, last.current_state, last.left, last.right)


def evaluate_batch(machines, max_steps):
    """
    Evaluate many machines at once with the numba kernel.
    machines: list of Machine snapshots sharing one max_length
    Returns one record per machine, in the same shape as evaluate_record.
    """
    if not machines:
        return []

    max_length = machines[0].max_length
    if any(m.max_length != max_length for m in machines):
        raise ValueError("All machines in a batch must share the same max_length")
    if max_length > MAX_BATCH_LENGTH:
        raise ValueError(f"Batch simulation supports max_length up to {MAX_BATCH_LENGTH}, got {max_length}")

    num_machines = len(machines)
    transitions, accepting, num_states = pack_tables([m.states for m in machines])

    lefts = np.array([m.left for m in machines], dtype=np.int64)
    rights = np.array([m.right for m in machines], dtype=np.int64)
    states = np.array([m.current_state for m in machines], dtype=np.int64)
    steps = np.zeros(num_machines, dtype=np.int64)
    status = np.zeros(num_machines, dtype=np.int64)

    simulate_batch(transitions, accepting, num_states, lefts, rights, states, steps, status,
                   max_steps, max_val(max_length))

    return [
        _record(int(steps[i]), int(status[i]), int(states[i]), int(lefts[i]), int(rights[i]))
        for i in range(num_machines)
    ]
