import json

import pytest
from click.testing import CliRunner

from keyspace.cli import cli


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv("KEYSPACE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("KEYSPACE_GUESSES_PER_SECOND", raising=False)
    return CliRunner()


def _json(result):
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_analyze_json(runner):
    result = runner.invoke(
        cli, ["--quiet", "-o", "json", "analyze", "abc", "--pool", "lowercase"]
    )
    report = _json(result)
    entry = report["results"][0]
    assert entry["effective_pool_size"] == 26
    assert entry["search_space_size"] == 12
    assert entry["bits_of_entropy"] == pytest.approx(14.10132, abs=1e-4)
    assert entry["entropy_defined"] is True
    assert "passphrase" not in entry
    assert report["summary"]["analysed"] == 1


def test_analyze_json_with_rates_and_passphrase(runner):
    result = runner.invoke(
        cli,
        [
            "--quiet", "-o", "json", "analyze", "A1",
            "-p", "upper", "-p", "numbers",
            "--rate", "1", "--rate", "1e3",
            "--show-passphrase",
        ],
    )
    entry = _json(result)["results"][0]
    assert entry["passphrase"] == "A1"
    assert entry["effective_pool_size"] == 36
    assert [c["seconds"] for c in entry["crack_times"]] == pytest.approx([2.0, 2e-3])


def test_analyze_undefined_entropy(runner):
    result = runner.invoke(
        cli, ["--quiet", "-o", "json", "analyze", "abc", "--pool", "numbers"]
    )
    entry = _json(result)["results"][0]
    assert entry["effective_pool_size"] == 0
    assert entry["bits_of_entropy"] is None
    assert entry["entropy_defined"] is False


def test_analyze_custom_pool_collapses_with_numbers(runner):
    result = runner.invoke(
        cli,
        ["--quiet", "-o", "json", "analyze", "42", "-p", "numbers", "--custom", "0123456789"],
    )
    entry = _json(result)["results"][0]
    assert entry["effective_pool_size"] == 10
    assert entry["total_allowed_characters_count"] == 10


def test_analyze_console_output(runner):
    result = runner.invoke(cli, ["--quiet", "analyze", "abc", "-p", "lowercase"])
    assert result.exit_code == 0, result.output
    assert "Passphrase Analysis" in result.stdout
    assert "Crack Time Estimates" in result.stdout


def test_analyze_prompts_when_passphrase_missing(runner):
    result = runner.invoke(
        cli, ["--quiet", "-o", "json", "analyze", "-p", "lowercase"], input="abcd\n"
    )
    assert result.exit_code == 0, result.output
    # The hidden prompt may be captured alongside stdout
    report = json.loads(result.stdout[result.stdout.index("{"):])
    assert report["results"][0]["passphrase_length"] == 4


def test_analyze_empty_passphrase_exits_with_one(runner):
    result = runner.invoke(cli, ["--quiet", "analyze", ""])
    assert result.exit_code == 1


def test_analyze_unknown_pool(runner):
    result = runner.invoke(cli, ["--quiet", "analyze", "abc", "--pool", "emoji"])
    assert result.exit_code == 2
    assert "Unknown character pool" in result.output


def test_analyze_rejects_non_positive_rate(runner):
    result = runner.invoke(cli, ["--quiet", "analyze", "abc", "--rate", "0"])
    assert result.exit_code == 2


def test_analyze_writes_report_file(runner, tmp_path):
    out = tmp_path / "report.json"
    result = runner.invoke(
        cli, ["--quiet", "-o", "json", "-f", str(out), "analyze", "hunter2"]
    )
    assert result.exit_code == 0, result.output
    report = json.loads(out.read_text(encoding="utf-8"))
    assert report["report_metadata"]["tool"] == "keyspace"
    assert report["results"][0]["passphrase_length"] == 7


def test_config_file_sets_rate(runner, tmp_path):
    config = tmp_path / "keyspace.toml"
    config.write_text("[analyzer]\nguesses_per_second = 12.0\n", encoding="utf-8")
    result = runner.invoke(
        cli, ["--quiet", "-c", str(config), "-o", "json", "analyze", "abc"]
    )
    entry = _json(result)["results"][0]
    assert entry["guesses_per_second"] == 12.0
    assert entry["time_taken"] == pytest.approx(1.0)


def test_invalid_config_file(runner, tmp_path):
    config = tmp_path / "keyspace.toml"
    config.write_text("[analyzer]\nguesses_per_second = -1\n", encoding="utf-8")
    result = runner.invoke(cli, ["--quiet", "-c", str(config), "analyze", "abc"])
    assert result.exit_code == 2


def test_batch_json(runner, tmp_path):
    source = tmp_path / "passphrases.txt"
    source.write_text("abc\n\nA1\nzzzz\n", encoding="utf-8")
    result = runner.invoke(
        cli,
        ["--quiet", "-o", "json", "batch", str(source), "-p", "lowercase", "-p", "upper", "-w", "2"],
    )
    report = _json(result)
    assert report["summary"]["total"] == 3
    assert report["summary"]["undefined_entropy"] == 0
    sizes = [entry["effective_pool_size"] for entry in report["results"]]
    assert sizes == [26, 26, 26]
    assert [entry["search_space_size"] for entry in report["results"]] == [12, 2, 84]


def test_batch_console_reads_stdin(runner):
    result = runner.invoke(cli, ["--quiet", "batch", "-"], input="abc\nxyz\n")
    assert result.exit_code == 0, result.output
    assert "Batch Analysis" in result.stdout


def test_batch_without_passphrases(runner, tmp_path):
    source = tmp_path / "empty.txt"
    source.write_text("\n\n", encoding="utf-8")
    result = runner.invoke(cli, ["--quiet", "batch", str(source)])
    assert result.exit_code == 1


def test_pools_json(runner):
    pools = _json(runner.invoke(cli, ["--quiet", "-o", "json", "pools"]))
    sizes = {pool["name"]: pool["size"] for pool in pools}
    assert sizes == {
        "uppercase_letters": 26,
        "lowercase_letters": 26,
        "numbers": 10,
        "symbols": 32,
        "space": 1,
    }


def test_analyze_json_long_passphrase(runner):
    result = runner.invoke(cli, ["--quiet", "-o", "json", "analyze", "a" * 2000])
    entry = _json(result)["results"][0]
    assert entry["passphrase_length"] == 2000
    assert entry["search_space_size"].endswith("e+6598")


def test_batch_json_long_passphrase(runner):
    result = runner.invoke(
        cli, ["--quiet", "-o", "json", "batch", "-"], input="abc\n" + "b" * 3000 + "\n"
    )
    sizes = [entry["search_space_size"] for entry in _json(result)["results"]]
    assert sizes[0] == 12
    assert isinstance(sizes[1], str)


def test_config_with_wrongly_typed_log_level(runner, tmp_path):
    config = tmp_path / "keyspace.toml"
    config.write_text("[global]\nlog_level = 5\n", encoding="utf-8")
    result = runner.invoke(cli, ["--quiet", "-c", str(config), "analyze", "abc"])
    assert result.exit_code == 2
    assert "log_level" in result.output
