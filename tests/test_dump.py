"""
调试输出测试
"""

import io
import json

import pytest
from rich.console import Console

from pwt.ciarray.case_insensitive_array import CaseInsensitiveArray
from pwt.ciarray.dump import dump_json, dump_text, print_dump


@pytest.fixture
def array():
    """与 var_dump 场景一致的数组"""
    array = CaseInsensitiveArray()
    array.append("One")
    array[2] = "Two"
    array["Thuna"] = "2"
    array["ThuNA"] = "3"
    return array


def test_dump_text(array):
    assert dump_text(array) == (
        "CaseInsensitiveArray(3) {\n"
        "  [0] => 'One'\n"
        "  [2] => 'Two'\n"
        "  ['ThuNA'] => '3'\n"
        "}"
    )


def test_dump_text_empty():
    assert dump_text(CaseInsensitiveArray()) == "CaseInsensitiveArray(0) {\n}"


def test_dump_does_not_move_cursor(array):
    array.next()
    dump_text(array)
    dump_json(array)
    assert array.key() == 2


def test_dump_json(array):
    document = json.loads(dump_json(array))
    assert document["$type"] == "CaseInsensitiveArray"
    assert document["count"] == 3
    assert document["next_free_index"] == 3
    assert document["entries"] == [
        {"key": 0, "value": "One"},
        {"key": 2, "value": "Two"},
        {"key": "ThuNA", "value": "3"},
    ]


def test_dump_json_nested_values():
    inner = CaseInsensitiveArray({"Inner": 1})
    array = CaseInsensitiveArray(
        {"blob": b"\x00\xff", "nested": inner, "map": {1: [1, 2]}, "obj": 1.5j}
    )
    entries = json.loads(dump_json(array))["entries"]
    values = {entry["key"]: entry["value"] for entry in entries}
    assert values["blob"] == {"$type": "bytes", "$hex": "00ff"}
    assert values["nested"] == {
        "$type": "CaseInsensitiveArray",
        "entries": [{"key": "Inner", "value": 1}],
    }
    assert values["map"] == {"1": [1, 2]}
    assert values["obj"] == {"$type": "complex", "$value": "1.5j"}


def test_dump_json_max_depth():
    array = CaseInsensitiveArray({"deep": [[[1]]]})
    entries = json.loads(dump_json(array, max_depth=2))["entries"]
    assert entries[0]["value"] == [[{"$depth": "<Max depth reached>"}]]


def test_print_dump(array):
    buffer = io.StringIO()
    console = Console(file=buffer, width=80, color_system=None)
    print_dump(array, console)
    output = buffer.getvalue()
    assert output.splitlines()[0] == "CaseInsensitiveArray(3) {"
    assert "['ThuNA'] => '3'" in output
    assert "thuna" not in output
