import json
import os
from datetime import datetime, timezone

from rich.console import Console

console = Console()


def console_message(msg, level="INFO"):
    console.print(f"[{level}] {msg}", markup=False, highlight=False, soft_wrap=True)


class JSONLogger:
    def __init__(self, output_directory="logs/", log_file_prefix="tapestack_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.today}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def _log_to_file(self, filename, entries):
        path = os.path.join(self.output_directory, filename)
        with open(path, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def log(self, entry: dict):
        """Log a single entry to the main run log."""
        self.log_batch([entry])

    def log_batch(self, entries: list):
        """Log a batch of entries to the main run log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def rotate(self):
        """Start a new main log file if the UTC date has changed."""
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def log_results(self, entries: list):
        """Split evaluation results into the halting and non-halting logs."""
        halting = [e for e in entries if e.get("halted")]
        non_halting = [e for e in entries if not e.get("halted")]
        if halting:
            self.log_halting(halting)
        if non_halting:
            self.log_non_halting(non_halting)

    def log_halting(self, entries: list):
        """Log full tables for halting machines."""
        self._log_to_file(f"halting_{self.today}.jsonl", entries)

    def log_non_halting(self, entries: list):
        """Log full tables for machines that hit the step cap or failed."""
        self._log_to_file(f"non_halting_{self.today}.jsonl", entries)

    def _trace_path(self, run_id):
        return os.path.join(self.output_directory, f"trace_{run_id}.jsonl")

    def iter_trace(self, run_id, snapshots, every=1):
        """Yield each snapshot, logging every ``every``-th one as it passes through.

        Lines already written stay on disk if the run raises part way.
        """
        with open(self._trace_path(run_id), "a", encoding="utf-8") as f:
            for step, machine in enumerate(snapshots):
                if step % every == 0:
                    f.write(json.dumps({
                        "step": step,
                        "state": machine.current_state,
                        "tape": machine.get_tape(),
                        "head": machine.max_length,
                    }) + "\n")
                    f.flush()
                yield machine

    def log_trace(self, run_id, snapshots, every=1):
        """Log every ``every``-th snapshot of a run, one line each."""
        total = sum(1 for _ in self.iter_trace(run_id, snapshots, every))
        return self._trace_path(run_id), len(range(0, total, every))
