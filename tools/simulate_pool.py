# tools/simulate_pool.py

import argparse
import json
from pathlib import Path

from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from logger.logger import JSONLogger, console_message
from tapestack.errors import TuringMachineError
from tapestack.evaluator import evaluate_batch, evaluate_record
from tapestack.simulator_batch import MAX_BATCH_LENGTH
from tapestack.table import parse_table
from tapestack.tape import MAX_LENGTH, parse_symbols
from tapestack.turing_machine import Machine


# === Utility Loaders ===
def load_index(index_file):
    with open(index_file, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def load_checkpoint(checkpoint_path):
    if checkpoint_path.exists():
        with open(checkpoint_path, "r", encoding="utf-8") as f:
            checkpoint = json.load(f)
        return checkpoint.get("completed", [])
    return []


def save_checkpoint(completed, checkpoint_path):
    with open(checkpoint_path, "w", encoding="utf-8") as f:
        json.dump({"completed": completed}, f, indent=4)


def build_machine(entry, max_length, tape_input):
    return Machine(parse_table(entry["table"]), max_length=max_length).set_input(tape_input)


# === Batch Runner ===
def simulate_entries(entries, max_steps, max_length=MAX_LENGTH, tape_input=(), use_numba=True):
    """Evaluate index entries; entries whose table cannot be built are reported as errors."""
    results = [None] * len(entries)
    machines = []
    positions = []

    for pos, entry in enumerate(entries):
        try:
            machines.append(build_machine(entry, max_length, tape_input))
            positions.append(pos)
        except TuringMachineError as e:
            console_message(f"Failed to build {entry['machine_id']}: {e}", level="WARNING")
            results[pos] = {"steps_taken": 0, "halted": False, "ones": 0, "status": "error", "error": str(e)}

    if use_numba:
        records = evaluate_batch(machines, max_steps)
    else:
        records = [evaluate_record(machine, max_steps) for machine in machines]

    for pos, record in zip(positions, records):
        results[pos] = record

    for entry, result in zip(entries, results):
        result["machine_id"] = entry["machine_id"]
        result["table"] = entry["table"]
    return results


def find_champion(results):
    """The halting machine with the most ones, ties broken by more steps."""
    halting = [r for r in results if r["halted"]]
    if not halting:
        return None
    return max(halting, key=lambda r: (r["ones"], r["steps_taken"]))


# === Main Simulation Runner ===
def simulate_pool(index_file, output_root="results", batch_size=4096, max_steps=1000000,
                  max_length=MAX_LENGTH, tape_input=(), use_numba=True, json_logger=None):
    case_name = Path(index_file).parent.name
    results_folder = Path(output_root) / case_name
    results_folder.mkdir(parents=True, exist_ok=True)
    results_file = results_folder / "results.jsonl"
    checkpoint_file = results_folder / "results_checkpoint.json"

    all_entries = load_index(index_file)
    completed = load_checkpoint(checkpoint_file)
    done = set(completed)

    pending = [e for e in all_entries if e["machine_id"] not in done]
    console_message(f"Loaded {len(all_entries):,} total machines. {len(pending):,} pending.")

    champion = None
    with open(results_file, "a", encoding="utf-8") as results_fh, Progress(
            SpinnerColumn(),
            BarColumn(),
            "[progress.percentage]{task.percentage:>3.0f}%",
            TextColumn("{task.completed}/{task.total} Machines"),
            TimeElapsedColumn()
    ) as progress:
        task = progress.add_task("[cyan]Simulating...", total=len(pending))

        for batch_start in range(0, len(pending), batch_size):
            batch = pending[batch_start:batch_start + batch_size]
            batch_results = simulate_entries(batch, max_steps, max_length, tape_input, use_numba)

            # === BULK WRITE once per batch ===
            for entry in batch_results:
                results_fh.write(json.dumps(entry) + "\n")
            results_fh.flush()
            if json_logger is not None:
                json_logger.rotate()
                json_logger.log_results(batch_results)

            completed.extend(r["machine_id"] for r in batch_results)
            save_checkpoint(completed, checkpoint_file)

            champion = find_champion(batch_results + ([champion] if champion else []))
            progress.update(task, advance=len(batch))

    if champion is not None:
        console_message(f"Champion {champion['machine_id']}: {champion['ones']} ones "
                        f"in {champion['steps_taken']:,} steps ({champion['table']})")
    console_message(f"All machines simulated. Results saved to {results_file}")
    return champion


# === CLI ===
def main():
    parser = argparse.ArgumentParser(description="Evaluate every table of a case index with checkpointing.")
    parser.add_argument("--index", required=True, help="Path to case index (e.g., tables/s2/index.jsonl)")
    parser.add_argument("--output", default="results", help="Results root folder (default: results)")
    parser.add_argument("--batch_size", type=int, default=4096, help="Batch size per save/checkpoint")
    parser.add_argument("--max_steps", type=int, default=1000000, help="Maximum steps before giving up")
    parser.add_argument("--max_length", type=int, default=MAX_LENGTH, help="Tape bits per side")
    parser.add_argument("--input", default="", help="Initial tape, head first (e.g., 0110)")
    parser.add_argument("--python", action="store_true", help="Use the pure Python engine instead of numba")
    parser.add_argument("--log", action="store_true", help="Also write halting / non-halting JSON-lines logs")
    parser.add_argument("--log_dir", default="logs/", help="Log output directory (default: logs/)")
    args = parser.parse_args()

    # === Safety Checks ===
    if not args.python and args.max_length > MAX_BATCH_LENGTH:
        parser.error(f"--max_length above {MAX_BATCH_LENGTH} needs --python (numba stacks are int64)")

    json_logger = JSONLogger(args.log_dir) if args.log else None

    simulate_pool(
        args.index,
        args.output,
        batch_size=args.batch_size,
        max_steps=args.max_steps,
        max_length=args.max_length,
        tape_input=parse_symbols(args.input),
        use_numba=not args.python,
        json_logger=json_logger,
    )


if __name__ == "__main__":
    main()
