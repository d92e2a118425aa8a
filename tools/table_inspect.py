# tools/table_inspect.py

import argparse
import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from tapestack.alphabet import Accept
from tapestack.table import format_table, load_table, parse_table

console = Console()


def load_machine_index(index_file):
    """Load index.jsonl into a dictionary mapping machine_id -> entry."""
    machine_map = {}
    with open(index_file, "r", encoding="utf-8") as f:
        for line in f:
            entry = json.loads(line)
            machine_map[entry["machine_id"]] = entry
    return machine_map


def describe_command(command):
    return f"{command.to_write.value}{command.to_move.value}{command.to_state}"


def build_transition_table(states):
    """Render a table as a state x symbol grid."""
    table = Table(title="Transition Table", show_header=True, header_style="bold magenta")
    table.add_column("State", justify="center")
    table.add_column("0", justify="center")
    table.add_column("1", justify="center")

    for index, state in enumerate(states, start=1):
        label = f"{index}" + (" (start)" if index == 1 else "")
        if isinstance(state, Accept):
            table.add_row(label, "[green]ACCEPT[/green]", "[green]ACCEPT[/green]")
        else:
            table.add_row(label, describe_command(state.on_zero), describe_command(state.on_one))
    return table


def pretty_print_table(states):
    console.print(build_transition_table(states))
    console.print(f"\nCompact: [cyan]{format_table(states)}[/cyan]")


def main():
    parser = argparse.ArgumentParser(description="State Table Inspector")
    parser.add_argument("--table", help="Compact table string or path to a table file")
    parser.add_argument("--index", help="Case index file, e.g., tables/s2/index.jsonl")
    parser.add_argument("--machine_id", help="Machine ID to inspect from --index, e.g., TM_000123")
    args = parser.parse_args()

    if args.table:
        states = load_table(args.table)
    elif args.index and args.machine_id:
        machine_map = load_machine_index(Path(args.index))
        if args.machine_id not in machine_map:
            raise ValueError(f"Machine ID {args.machine_id} not found in {args.index}")
        entry = machine_map[args.machine_id]
        console.print(f"[INFO] Machine {args.machine_id}", markup=False)
        console.print(f"  States: {entry['states']}")
        console.print(f"  Table Hash: {entry['table_hash']}")
        states = parse_table(entry["table"])
    else:
        raise ValueError("You must specify either --table or --index with --machine_id.")

    pretty_print_table(states)


if __name__ == "__main__":
    main()
