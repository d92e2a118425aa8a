from tapestack.alphabet import ACCEPT, Accept, Command, ControlState, Direction, Symbol, Transition
from tapestack.errors import InvalidState, TableFormatError, TapeBoundExceeded, TuringMachineError
from tapestack.evaluator import Evaluation, evaluate, evaluate_batch, evaluate_record
from tapestack.table import (
    BUSY_BEAVER_3, format_table, load_table, parse_table, table_from_json, table_to_json, validate_table,
)
from tapestack.tape import (
    MAX_LENGTH, MAX_VAL, count_ones, decode_symbols, decode_to_string, encode_input, max_val, parse_symbols,
)
from tapestack.turing_machine import Machine, run

__version__ = "0.1.0"
