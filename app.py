# app.py

import argparse
from itertools import islice
from pathlib import Path

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from config.config_loader import load_config, save_config
from logger.logger import JSONLogger
from tapestack.errors import TuringMachineError
from tapestack.evaluator import evaluate
from tapestack.table import BUSY_BEAVER_3, format_table, load_table, validate_table
from tapestack.tape import parse_symbols
from tapestack.turing_machine import Machine, run
from tools.table_generator import hash_table
from tools.table_inspect import pretty_print_table

console = Console()

CONFIG_PATH = Path(__file__).resolve().parent / "config" / "runtime_config.json"


# === Utilities ===
def load_runtime_config(path=CONFIG_PATH):
    try:
        return load_config(str(path), verbose=False)
    except FileNotFoundError:
        console.print(f"[red]Error: {path} not found![/red]")
        raise SystemExit(1)


def build_machine(table_source, tape_input, config):
    states = load_table(table_source) if table_source else list(BUSY_BEAVER_3)
    validate_table(states)
    return Machine(states, max_length=config["max_length"]).set_input(parse_symbols(tape_input))


def render_snapshot(machine, window=0):
    """Tape line plus a caret line pointing at the head cell."""
    tape = machine.get_tape()
    head = machine.max_length
    if window:
        tape = tape[max(head - window, 0):head + window + 1]
        head = min(head, window)
    return f"{tape}\n{' ' * head}^\n"


def trace(machine, max_steps, window=0, json_logger=None, every=1):
    """Print each snapshot of a run as it is produced, capped at max_steps transitions."""
    snapshots = islice(run(machine), max_steps + 1)
    if json_logger is not None:
        snapshots = json_logger.iter_trace(hash_table(format_table(machine.states)), snapshots, every=every)

    steps = 0
    last = machine
    for steps, last in enumerate(snapshots):
        console.print(render_snapshot(last, window), markup=False, highlight=False, soft_wrap=True)

    if not last.is_halted:
        console.print(f"[yellow]Stopped after {max_steps:,} steps without halting.[/yellow]")
    return steps


def report_evaluation(machine, max_steps, json_logger=None):
    result = evaluate(machine, max_steps)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Table")
    table.add_column("Halted", justify="center")
    table.add_column("Steps", justify="right")
    table.add_column("Ones", justify="right")
    color = "green" if result.halted else "yellow"
    table.add_row(format_table(machine.states), f"[{color}]{result.halted}[/{color}]",
                  f"{result.steps:,}", str(result.ones))
    console.print(table)

    if json_logger is not None:
        json_logger.log({"table": format_table(machine.states), **result.to_dict()})
    return result


def show_main_menu():
    console.print("\n[bold cyan]Tape Stack Turing Machine[/bold cyan]")
    console.print("[1] Trace a Machine")
    console.print("[2] Evaluate a Machine")
    console.print("[3] Inspect a Table")
    console.print("[4] Edit Config")
    console.print("[5] Exit")


def prompt_machine(config):
    source = Prompt.ask("Table (compact notation or file path)", default=format_table(BUSY_BEAVER_3))
    tape_input = Prompt.ask("Initial tape, head first", default="0")
    return build_machine(source, tape_input, config)


def handle_edit_config(config):
    console.print("\n[bold]Edit Configuration[/bold]")

    config.update({
        "max_length": IntPrompt.ask("Tape bits per side", default=config["max_length"]),
        "max_steps": IntPrompt.ask("Max Steps", default=config["max_steps"]),
        "batch_size": IntPrompt.ask("Batch Size", default=config["batch_size"]),
        "use_numba": Confirm.ask("Use numba for pool simulation?", default=config["use_numba"]),
        "trace_window": IntPrompt.ask("Trace window (0 = whole tape)", default=config["trace_window"]),
    })

    save_config(config, str(CONFIG_PATH))
    console.print("[green]Configuration updated successfully.[/green]")


def interactive_main():
    config = load_runtime_config()
    json_logger = JSONLogger(config["output_directory"], config["log_file_prefix"])

    while True:
        show_main_menu()
        choice = Prompt.ask("\nChoose an option", choices=["1", "2", "3", "4", "5"], default="5")

        try:
            if choice == "1":
                trace(prompt_machine(config), config["max_steps"], config["trace_window"],
                      json_logger, config["log_frequency"])
            elif choice == "2":
                report_evaluation(prompt_machine(config), config["max_steps"], json_logger)
            elif choice == "3":
                pretty_print_table(prompt_machine(config).states)
            elif choice == "4":
                handle_edit_config(config)
                config = load_runtime_config()
            elif choice == "5":
                console.print("[bold green]Goodbye![/bold green]")
                break
        except (TuringMachineError, ValueError) as e:
            console.print(f"[red]Error: {e}[/red]")


# === CLI Mode for Automation ===
def cli_main(args):
    config = load_runtime_config(args.config)
    max_steps = config["max_steps"] if args.max_steps is None else args.max_steps
    machine = build_machine(args.table, args.input, config)
    json_logger = JSONLogger(config["output_directory"], config["log_file_prefix"]) if args.log else None

    result = None
    if args.trace:
        trace(machine, max_steps, config["trace_window"], json_logger, config["log_frequency"])
    if args.evaluate:
        result = report_evaluation(machine, max_steps, json_logger)
    return result


def main():
    parser = argparse.ArgumentParser(description="Two-stack Turing machine simulator")
    parser.add_argument("--table", help="Compact table string or path to a table file (default: 3-state busy beaver)")
    parser.add_argument("--input", default="0", help="Initial tape, head first (default: 0)")
    parser.add_argument("--trace", action="store_true", help="Print every snapshot of the run")
    parser.add_argument("--evaluate", action="store_true", help="Print the run summary")
    parser.add_argument("--max_steps", type=int, help="Override the configured step cap")
    parser.add_argument("--log", action="store_true", help="Also write JSON-lines logs")
    parser.add_argument("--config", default=str(CONFIG_PATH), help="Runtime config path")
    args = parser.parse_args()

    if args.trace or args.evaluate:
        cli_main(args)
    else:
        interactive_main()


if __name__ == "__main__":
    main()
