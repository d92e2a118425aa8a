import json
from itertools import islice

from logger.logger import JSONLogger
from tapestack.turing_machine import run


def read_lines(path):
    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f]


class TestJSONLogger:
    def test_log_appends_to_daily_file(self, tmp_path):
        logger = JSONLogger(str(tmp_path), "run_")
        logger.log({"a": 1})
        logger.log_batch([{"b": 2}, {"c": 3}])
        assert logger.current_log.startswith(str(tmp_path))
        assert read_lines(logger.current_log) == [{"a": 1}, {"b": 2}, {"c": 3}]

    def test_log_results_splits_by_outcome(self, tmp_path):
        logger = JSONLogger(str(tmp_path))
        logger.log_results([
            {"machine_id": "TM_000000", "halted": True},
            {"machine_id": "TM_000001", "halted": False},
            {"machine_id": "TM_000002", "halted": True},
        ])
        halting = read_lines(tmp_path / f"halting_{logger.today}.jsonl")
        non_halting = read_lines(tmp_path / f"non_halting_{logger.today}.jsonl")
        assert [e["machine_id"] for e in halting] == ["TM_000000", "TM_000002"]
        assert [e["machine_id"] for e in non_halting] == ["TM_000001"]

    def test_log_trace(self, tmp_path, busy_beaver):
        logger = JSONLogger(str(tmp_path))
        path, count = logger.log_trace("bb3", run(busy_beaver))
        lines = read_lines(path)
        assert count == len(lines) == 14
        assert lines[0]["step"] == 0
        assert lines[-1] == {
            "step": 13,
            "state": 4,
            "tape": "0" * 37 + "111111" + "0" * 37,
            "head": 40,
        }

    def test_log_trace_every(self, tmp_path, self_loop):
        logger = JSONLogger(str(tmp_path))
        path, count = logger.log_trace("loop", islice(run(self_loop), 11), every=5)
        assert count == 3
        assert [line["step"] for line in read_lines(path)] == [0, 5, 10]

    def test_rotate_follows_the_date(self, tmp_path):
        logger = JSONLogger(str(tmp_path), "run_")
        logger.today = "2000-01-01"
        logger.current_log = logger._get_log_filename()
        logger.rotate()
        assert logger.today != "2000-01-01"
        assert logger.current_log.endswith(f"run_{logger.today}.jsonl")

    def test_iter_trace_passes_snapshots_through(self, tmp_path, busy_beaver):
        logger = JSONLogger(str(tmp_path))
        snapshots = list(logger.iter_trace("bb3", run(busy_beaver), every=4))
        assert len(snapshots) == 14
        assert snapshots[0] is busy_beaver
        lines = read_lines(tmp_path / "trace_bb3.jsonl")
        assert [line["step"] for line in lines] == [0, 4, 8, 12]
