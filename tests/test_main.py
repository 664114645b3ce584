import json

import pytest

from owner_lookup.config import TABLES_PATH_ENV
from owner_lookup.main import load_addresses_from_file, parse_args, run


@pytest.fixture(autouse=True)
def _no_tables_env(monkeypatch):
    monkeypatch.delenv(TABLES_PATH_ENV, raising=False)


def test_address_or_file_is_required():
    with pytest.raises(SystemExit):
        parse_args([])


def test_json_output(capsys):
    args = parse_args(["123 Main Street, Atlanta, GA 30303", "--json"])

    assert run(args) == 0

    out = json.loads(capsys.readouterr().out)
    assert out == [{"raw": "123 Main Street, Atlanta, GA 30303", "normalized": "123 MAIN ST"}]


def test_summary_output(capsys):
    assert run(parse_args(["789 north avenue", "Atlanta GA"])) == 0
    out = capsys.readouterr().out
    assert "789 N AVE" in out
    assert "(empty)" in out


def test_load_addresses_from_json_file(tmp_path):
    path = tmp_path / "addresses.json"
    path.write_text(
        json.dumps(["100 Peachtree St", {"address": "789 north avenue"}, {"id": 3}]),
        encoding="utf-8",
    )
    assert load_addresses_from_file(str(path)) == ["100 Peachtree St", "789 north avenue"]


def test_load_addresses_from_text_file(tmp_path):
    path = tmp_path / "addresses.txt"
    path.write_text("100 Peachtree St\n\n  789 north avenue  \n", encoding="utf-8")
    assert load_addresses_from_file(str(path)) == ["100 Peachtree St", "789 north avenue"]


def test_from_file_and_save(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("456 Martin Luther King Jr Drive NW\n", encoding="utf-8")
    target = tmp_path / "out.json"

    args = parse_args(["100 Peachtree St Atlanta GA", "--from-file", str(source), "--save", str(target)])
    assert run(args) == 0

    saved = json.loads(target.read_text(encoding="utf-8"))
    assert [r["normalized"] for r in saved] == ["100 PEACHTREE ST", "456 M L KING JR DR NW"]


def test_bad_tables_file_fails_run(tmp_path):
    args = parse_args(["100 Peachtree St", "--tables", str(tmp_path / "missing.json")])
    assert run(args) == 1


def test_missing_input_file_fails_run(tmp_path):
    args = parse_args(["--from-file", str(tmp_path / "missing.txt")])
    assert run(args) == 1


def test_text_line_that_parses_as_json_number(tmp_path):
    path = tmp_path / "addresses.txt"
    path.write_text("30303\n", encoding="utf-8")
    assert load_addresses_from_file(str(path)) == ["30303"]


def test_unwritable_save_path_fails_run(tmp_path):
    args = parse_args(["100 Peachtree St", "--save", str(tmp_path / "no-such-dir" / "out.json")])
    assert run(args) == 1
