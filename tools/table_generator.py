# tools/table_generator.py

import argparse
import hashlib
import json
import multiprocessing
from datetime import datetime
from functools import partial
from itertools import product
from pathlib import Path

from logger.logger import console_message
from tapestack.alphabet import ACCEPT, Command, Direction, Symbol, Transition
from tapestack.table import format_table


# === COMMAND OPTION MAP ===
def generate_command_options(num_states):
    """Build every command a transition can hold; state num_states + 1 is Accept."""
    options = []
    for to_write in (Symbol.ZERO, Symbol.ONE):
        for direction in (Direction.LEFT, Direction.RIGHT):
            for to_state in range(1, num_states + 2):
                options.append(Command(to_write, direction, to_state))
    return options


def hash_table(table_text):
    """Hash a compact table deterministically."""
    return hashlib.sha256(table_text.encode("utf-8")).hexdigest()


def build_table(commands, num_states):
    table = [Transition(commands[i], commands[i + 1]) for i in range(0, 2 * num_states, 2)]
    table.append(ACCEPT)
    return table


def worker_generate(first_choice, num_states, options):
    """Build every table whose first command is options[first_choice]."""
    accept_id = num_states + 1
    tables = []
    num_commands = 2 * num_states
    for rest in product(range(len(options)), repeat=num_commands - 1):
        commands = [options[first_choice]] + [options[i] for i in rest]

        # A table that can never reach Accept cannot halt
        if not any(c.to_state == accept_id for c in commands):
            continue
        tables.append(format_table(build_table(commands, num_states)))
    return tables


def generate_tables(num_states=2, num_workers=1, output_root="tables"):
    """Enumerate all tables for a state count and write the case index."""
    case_folder = Path(output_root) / f"s{num_states}"
    case_folder.mkdir(parents=True, exist_ok=True)
    index_file = case_folder / "index.jsonl"

    options = generate_command_options(num_states)
    total_combinations = len(options) ** (2 * num_states)
    console_message(f"Preparing to generate {total_combinations:,} possible tables...")

    worker = partial(worker_generate, num_states=num_states, options=options)
    if num_workers > 1:
        console_message(f"Using {num_workers} CPU cores...")
        with multiprocessing.Pool(processes=num_workers) as pool:
            chunks = pool.map(worker, range(len(options)))
    else:
        chunks = map(worker, range(len(options)))

    machine_counter = 0
    with open(index_file, "w", encoding="utf-8") as f:
        for chunk in chunks:
            for table_text in chunk:
                entry = {
                    "machine_id": f"TM_{machine_counter:06d}",
                    "states": num_states,
                    "table": table_text,
                    "table_hash": hash_table(table_text),
                    "timestamp": datetime.now().isoformat(),
                }
                f.write(json.dumps(entry) + "\n")
                machine_counter += 1

                if machine_counter % 10000 == 0:
                    console_message(f"Generated {machine_counter:,} tables so far...")

    skipped = total_combinations - machine_counter
    console_message(f"Finished generating {machine_counter:,} tables.")
    console_message(f"Skipped {skipped:,} tables without any transition into Accept.")
    return index_file


# === CLI WRAPPER ===
def main():
    parser = argparse.ArgumentParser(description="Enumerate every n-state, 2-symbol state table")
    parser.add_argument("--states", type=int, default=2, help="Number of non-accepting states (default=2)")
    parser.add_argument("--cpu_cores", type=int, default=1, help="Number of CPU cores to use")
    parser.add_argument("--output", default="tables", help="Root folder for case indexes")
    args = parser.parse_args()

    if args.states < 1:
        raise ValueError("--states must be at least 1")

    generate_tables(num_states=args.states, num_workers=args.cpu_cores, output_root=args.output)


if __name__ == "__main__":
    main()
