import json

import pytest

from tapestack.alphabet import ACCEPT, Command, Direction, Symbol, Transition
from tapestack.errors import TableFormatError
from tapestack.table import (
    BUSY_BEAVER_3, format_table, load_table, parse_table, table_from_json, table_to_json, validate_table,
)

BUSY_BEAVER_TEXT = "1R2,1L3_1L1,1R2_1L2,1N4_ACCEPT"


class TestCompactNotation:
    def test_format_busy_beaver(self):
        assert format_table(BUSY_BEAVER_3) == BUSY_BEAVER_TEXT

    def test_parse_busy_beaver(self):
        assert parse_table(BUSY_BEAVER_TEXT) == list(BUSY_BEAVER_3)

    def test_parse_multi_digit_state(self):
        table = parse_table("0L12,1N1_accept")
        assert table[0].on_zero == Command(Symbol.ZERO, Direction.LEFT, 12)
        assert table[1] is ACCEPT

    @pytest.mark.parametrize("text", [
        "1X2,1L3_ACCEPT",
        "2R2,1L3_ACCEPT",
        "1R2_ACCEPT",
        "1R2,1L3,1L1_ACCEPT",
        "1R,1L3_ACCEPT",
    ])
    def test_malformed(self, text):
        with pytest.raises(TableFormatError):
            parse_table(text)


class TestJsonForm:
    def test_to_json(self):
        data = table_to_json(BUSY_BEAVER_3)
        assert data[0] == {"on_zero": [1, "R", 2], "on_one": [1, "L", 3]}
        assert data[2]["on_one"] == [1, "N", 4]
        assert data[3] == "ACCEPT"
        # Must survive a trip through the json module
        assert json.loads(json.dumps(data)) == data

    def test_from_json(self):
        assert table_from_json(table_to_json(BUSY_BEAVER_3)) == list(BUSY_BEAVER_3)

    @pytest.mark.parametrize("data", [
        {"on_zero": [1, "R", 1]},
        ["HALT"],
        [{"on_zero": [1, "R", 1]}],
        [{"on_zero": [2, "R", 1], "on_one": [1, "L", 1]}],
        [{"on_zero": [1, "X", 1], "on_one": [1, "L", 1]}],
        [{"on_zero": [1, "R"], "on_one": [1, "L", 1]}],
    ])
    def test_rejects_bad_entries(self, data):
        with pytest.raises(TableFormatError):
            table_from_json(data)


class TestValidateTable:
    def test_busy_beaver_is_valid(self):
        validate_table(BUSY_BEAVER_3)

    def test_empty_table(self):
        with pytest.raises(TableFormatError):
            validate_table([])

    @pytest.mark.parametrize("target", [0, 3, -1])
    def test_target_outside_table(self, target):
        states = [
            Transition(Command(Symbol.ONE, Direction.RIGHT, 2), Command(Symbol.ONE, Direction.LEFT, target)),
            ACCEPT,
        ]
        with pytest.raises(TableFormatError, match="on_one"):
            validate_table(states)


class TestLoadTable:
    def test_literal_string(self):
        assert load_table(BUSY_BEAVER_TEXT) == list(BUSY_BEAVER_3)

    def test_json_file(self, tmp_path):
        path = tmp_path / "bb3.json"
        path.write_text(json.dumps(table_to_json(BUSY_BEAVER_3)))
        assert load_table(str(path)) == list(BUSY_BEAVER_3)

    def test_compact_file(self, tmp_path):
        path = tmp_path / "bb3.txt"
        path.write_text(BUSY_BEAVER_TEXT + "\n")
        assert load_table(str(path)) == list(BUSY_BEAVER_3)

    def test_invalid_json_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{")
        with pytest.raises(TableFormatError):
            load_table(str(path))
