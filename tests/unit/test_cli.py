"""Tests for the fancylistener command-line entry point."""

import logging

import pytest

from fancylistener import cli
from fancylistener.cli import StartupError, main, parse_port, prepare_output_dir


class TestParsePort:
    def test_accepts_valid_port(self):
        assert parse_port("8080") == 8080

    @pytest.mark.parametrize("raw", ["0", "65536", "abc", "-5", ""])
    def test_rejects_invalid_port(self, raw):
        with pytest.raises(StartupError, match="Invalid port number"):
            parse_port(raw)


class TestPrepareOutputDir:
    def test_creates_missing_directory(self, tmp_path):
        target = tmp_path / "logs" / "nested"
        result = prepare_output_dir(str(target))

        assert result == target.resolve()
        assert target.is_dir()

    def test_leaves_no_write_test_file_behind(self, tmp_path):
        prepare_output_dir(str(tmp_path))
        assert not (tmp_path / cli.WRITE_TEST_FILE).exists()

    def test_logs_created_directory(self, tmp_path, caplog, capsys):
        target = tmp_path / "fresh"

        with caplog.at_level(logging.INFO, logger="fancylistener.cli"):
            prepare_output_dir(str(target))

        assert "Created output directory" in caplog.text
        assert capsys.readouterr().out == ""

    def test_rejects_tilde(self):
        with pytest.raises(StartupError, match="invalid characters"):
            prepare_output_dir("~/logs")

    def test_rejects_path_that_is_a_file(self, tmp_path):
        occupied = tmp_path / "file.txt"
        occupied.write_text("x", encoding="utf-8")

        with pytest.raises(StartupError, match="not writable"):
            prepare_output_dir(str(occupied))

    def test_returns_absolute_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert prepare_output_dir("out").is_absolute()


class TestMain:
    def test_no_arguments_prints_usage_and_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
        assert "Usage: fancylistener -o <output-directory>" in capsys.readouterr().err

    def test_missing_output_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-p", "3000"])

        assert exc_info.value.code == 1
        assert "Output directory (-o) is required" in capsys.readouterr().err

    def test_invalid_port_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-o", str(tmp_path), "-p", "70000"])

        assert exc_info.value.code == 1
        assert "Error: Invalid port number" in capsys.readouterr().err

    def test_output_flag_without_value_exits_with_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-o"])

        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_unknown_option_exits_with_error(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-o", str(tmp_path), "--bogus"])

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Error: unrecognized arguments: --bogus" in err

    def test_runs_uvicorn_with_validated_settings(self, tmp_path, monkeypatch):
        import uvicorn

        calls = {}

        def fake_run(app, **kwargs):
            calls["app"] = app
            calls.update(kwargs)

        monkeypatch.setattr(uvicorn, "run", fake_run)
        monkeypatch.chdir(tmp_path)

        main(["-o", str(tmp_path / "out"), "-p", "8123"])

        assert calls["port"] == 8123
        assert calls["host"] == "127.0.0.1"
        assert calls["app"].state.settings.listeners_file == (tmp_path / "out").resolve() / "listeners.json"
