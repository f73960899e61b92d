import importlib.util

import pandas as pd
import pytest

from conftest import ROOT


@pytest.fixture(scope="module")
def example():
    path = ROOT / "examples" / "matcher_example.py"
    spec = importlib.util.spec_from_file_location("matcher_example", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_example_compares_two_files(example, tmp_path):
    base = tmp_path / "base.csv"
    other = tmp_path / "other.csv"
    pd.DataFrame({"id": ["1"], "description": ["login user with password"]}).to_csv(base, index=False)
    pd.DataFrame({
        "id": ["2", "3", "4"],
        "description": [
            "user login with password",
            "completely unrelated text about weather",
            "weather report for tomorrow",
        ],
    }).to_csv(other, index=False)

    results = example.match_spreadsheets(base, other)

    assert [r.match_id for r in results] == ["2"]


def test_example_finds_duplicates_with_policy(example, tmp_path):
    base = tmp_path / "base.csv"
    pd.DataFrame({
        "id": ["A", "A", "B"],
        "description": ["red apple", "red apple", "red car"],
    }).to_csv(base, index=False)

    results = example.match_spreadsheets(base, policy="exclude_same_id")

    assert [r.match_id for r in results] == ["B", "B", "A"]


def test_example_reraises_errors(example, tmp_path):
    with pytest.raises(FileNotFoundError):
        example.match_spreadsheets(tmp_path / "missing.xlsx")


def test_command_line_second_path_is_match_file(example):
    args = example.parse_args(["stories.xlsx", "other.xlsx"])

    assert args.match_file.name == "other.xlsx"
    assert args.output_file is None


def test_command_line_duplicates_with_output(example, tmp_path):
    base = tmp_path / "stories.csv"
    output = tmp_path / "dupes.csv"
    pd.DataFrame({
        "id": ["A", "B", "C", "D"],
        "description": [
            "reset password email",
            "reset password email",
            "weather today",
            "monthly report",
        ],
    }).to_csv(base, index=False)

    results = example.main([str(base), "--output", str(output), "--policy", "exclude_same_index"])

    assert [r.match_id for r in results] == ["B", "A"]
    written = pd.read_csv(output, dtype=str)
    assert list(written["match_id"]) == ["B", "A"]
