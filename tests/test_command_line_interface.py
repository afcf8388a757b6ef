import pathlib

import py
import pytest
from click.testing import CliRunner

import caddy_log_converter
from caddy_log_converter._command_line_interface import _convert_caddy_log_files_cli

EXAMPLE_CADDY_LOG_FILE_PATH = pathlib.Path(__file__).parent / "examples" / "conversion_example_0" / "caddy_access.log"


@pytest.fixture
def error_folder_path(tmpdir: py.path.local, monkeypatch: pytest.MonkeyPatch) -> pathlib.Path:
    """Redirect error collection away from the home directory."""
    base_folder_path = pathlib.Path(tmpdir) / "base_folder"
    monkeypatch.setenv("CADDY_LOG_CONVERTER_BASE_FOLDER_PATH", str(base_folder_path))

    return base_folder_path / "errors"


def test_print_log_format():
    runner = CliRunner()
    result = runner.invoke(_convert_caddy_log_files_cli, ["--print-log-format", str(EXAMPLE_CADDY_LOG_FILE_PATH)])

    assert result.exit_code == 0
    assert result.stdout == "%x\\t%v\\t%h\\t%m\\t%U\\t%s\\t%b\\t%R\\t%u\\t%M\\t%T\n"
    assert result.stdout == f"{caddy_log_converter.GOACCESS_LOG_FORMAT}\n"


def test_filters_from_options():
    runner = CliRunner()
    result = runner.invoke(
        _convert_caddy_log_files_cli,
        ["--include-hosts", "www.", "--exclude_urls", "/health", str(EXAMPLE_CADDY_LOG_FILE_PATH)],
    )

    assert result.exit_code == 0
    output_lines = result.stdout.splitlines()
    assert [output_line.split("\t")[4] for output_line in output_lines] == ["/index.html?lang=en", "/style.css"]


def test_exclude_client_option():
    runner = CliRunner()
    result = runner.invoke(_convert_caddy_log_files_cli, ["--exclude-client", "10.", str(EXAMPLE_CADDY_LOG_FILE_PATH)])

    assert result.exit_code == 0
    client_hosts = [output_line.split("\t")[2] for output_line in result.stdout.splitlines()]
    assert client_hosts == ["203.0.113.5", "2001:db8::1", "192.168.1.7"]


def test_no_input_files():
    runner = CliRunner()
    result = runner.invoke(_convert_caddy_log_files_cli, [])

    assert result.exit_code == 0
    assert result.stdout == ""


def test_failing_source_stops_processing(tmpdir: py.path.local, error_folder_path: pathlib.Path):
    tmpdir = pathlib.Path(tmpdir)

    missing_caddy_log_file_path = tmpdir / "missing.log"
    later_caddy_log_file_path = tmpdir / "later.log"
    later_caddy_log_file_path.write_text('{"ts": 5, "request": {"host": "later.example.com"}, "status": 200}')

    runner = CliRunner()
    result = runner.invoke(
        _convert_caddy_log_files_cli,
        [str(EXAMPLE_CADDY_LOG_FILE_PATH), str(missing_caddy_log_file_path), str(later_caddy_log_file_path)],
    )

    assert result.exit_code == 1
    assert f"Could not process {missing_caddy_log_file_path}" in result.output
    assert "later.example.com" not in result.output
    assert sum(1 for line in result.output.splitlines() if line.startswith("17000000")) == 4

    collected_error_files = list(error_folder_path.iterdir())
    assert len(collected_error_files) == 1
    assert "FileNotFoundError" in collected_error_files[0].read_text()


def test_failure_is_reported_when_error_collection_fails(tmpdir: py.path.local, monkeypatch: pytest.MonkeyPatch):
    tmpdir = pathlib.Path(tmpdir)

    regular_file_path = tmpdir / "regular_file"
    regular_file_path.write_text("not a folder")
    monkeypatch.setenv("CADDY_LOG_CONVERTER_BASE_FOLDER_PATH", str(regular_file_path / "base_folder"))

    missing_caddy_log_file_path = tmpdir / "missing.log"

    runner = CliRunner()
    result = runner.invoke(_convert_caddy_log_files_cli, [str(missing_caddy_log_file_path)])

    assert result.exit_code == 1
    assert f"Could not process {missing_caddy_log_file_path}" in result.output
    assert "Could not record the error" in result.output
    assert not isinstance(result.exception, OSError)
