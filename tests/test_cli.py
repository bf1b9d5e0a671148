import json

import pytest
from typer.testing import CliRunner

from rent_vs_buy.cli import app
from rent_vs_buy.presets import PresetStore

runner = CliRunner()


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "presets.json"


def invoke(store_path, *args):
    return runner.invoke(app, ["--store", str(store_path), *args])


def test_run_defaults(store_path):
    result = invoke(store_path, "run")
    assert result.exit_code == 0, result.output
    assert "For this scenario," in result.output
    assert "Total Net Worth" in result.output


def test_run_with_overrides_and_timeline(store_path):
    result = invoke(store_path, "run", "--set", "duration=3", "--timeline")
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output[result.output.index("{"):])
    assert [row["year"] for row in payload["timeline"]] == [1, 2, 3]
    assert payload["chart"]["labels"] == ["Year 1", "Year 2", "Year 3"]


def test_run_rejects_bad_input(store_path):
    result = invoke(store_path, "run", "--set", "home-price=lots")
    assert result.exit_code == 1
    assert "home-price" in result.output


def test_preset_lifecycle(store_path):
    assert "No presets saved" in invoke(store_path, "presets", "list").output

    saved = invoke(store_path, "presets", "save", "city", "--set", "monthly-rent=2800")
    assert saved.exit_code == 0, saved.output
    assert 'Preset "city" saved!' in saved.output
    assert PresetStore(store_path).get("city").monthly_rent == 2800.0

    shown = invoke(store_path, "presets", "show", "city")
    assert json.loads(shown.output)["monthly-rent"] == 2800.0

    assert invoke(store_path, "presets", "list").output.split() == ["city"]
    assert 'Preset "city" deleted.' in invoke(store_path, "presets", "delete", "city").output
    missing = invoke(store_path, "presets", "delete", "city")
    assert missing.exit_code == 0
    assert "No preset named" in missing.output


def test_run_from_preset(store_path):
    invoke(store_path, "presets", "save", "short", "--set", "duration=2")
    result = invoke(store_path, "run", "--preset", "short", "--timeline")
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output[result.output.index("{"):])
    assert len(payload["timeline"]) == 2


def test_compare(store_path):
    invoke(store_path, "presets", "save", "city", "--set", "home-price=650000")
    invoke(store_path, "presets", "save", "suburb", "--set", "home-price=350000")
    result = invoke(store_path, "compare", "city", "suburb")
    assert result.exit_code == 0, result.output
    assert "Scenario A: city" in result.output
    assert "Scenario B: suburb" in result.output


def test_compare_requires_two_presets(store_path):
    invoke(store_path, "presets", "save", "city")
    result = invoke(store_path, "compare", "city", "nowhere")
    assert result.exit_code == 1
    assert "Please select two valid presets to compare." in result.output


def test_run_prints_non_finite_results(store_path):
    result = invoke(
        store_path,
        "run",
        "--set", "home-price=1e308",
        "--set", "home-appreciation=100",
        "--set", "duration=2",
    )
    assert result.exit_code == 0, result.output
    assert "NaN" in result.output


def test_run_rejects_runaway_horizon(store_path):
    result = invoke(store_path, "run", "--set", "duration=1000000000")
    assert result.exit_code == 1
    assert "duration" in result.output


def test_run_from_malformed_preset(store_path):
    store_path.write_text(json.dumps({"scalar": 5}), encoding="utf-8")
    result = invoke(store_path, "run", "--preset", "scalar")
    assert result.exit_code == 1
    assert 'Preset "scalar" is invalid' in result.output
