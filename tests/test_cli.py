"""Tests for the env-loader command line and launcher."""

from pathlib import Path

import pytest
from conftest import ExecCall

from env_loader.cli import create_parser, main, run
from env_loader.engine import LoaderConfig
from env_loader.engine.secrets import SecretRedactor, StaticSecretProvider
from env_loader.launcher import EXIT_NOT_FOUND, launch


class TestParser:
    def test_options_then_command(self) -> None:
        args = create_parser().parse_args(
            ["-p", "PATH", "--pass", "HOME", "-i", "-e", "MYAPP_", "server", "--port", "3000"]
        )
        assert args.pass_list == ["PATH", "HOME"]
        assert args.ignore_missing is True
        assert args.env_prefix == "MYAPP_"
        assert args.cmd == ["server", "--port", "3000"]

    def test_log_level_is_case_insensitive(self) -> None:
        args = create_parser().parse_args(["--log-level", "debug", "true"])
        assert args.log_level == "DEBUG"

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["-i"])
        assert exc_info.value.code == 2


class TestRun:
    def test_end_to_end_launches_child(
        self, static_provider: StaticSecretProvider, exec_recorder: ExecCall
    ) -> None:
        config = LoaderConfig(
            pass_list=frozenset({"PATH"}), env_prefix="MYAPP_", command=["server", "-v"]
        )
        snapshot = {"MYAPP_DEBUG": "value::true", "MYAPP_PORT": "value::3000", "PATH": "/bin"}

        exit_code = run(config, snapshot, static_provider)

        assert exit_code == 0
        assert exec_recorder.calls[0][0] == "server"
        assert exec_recorder.args == ["server", "-v"]
        assert exec_recorder.environment == {"PATH": "/bin", "DEBUG": "true", "PORT": "3000"}

    def test_unknown_method_exits_without_launching(
        self, static_provider: StaticSecretProvider, exec_recorder: ExecCall
    ) -> None:
        config = LoaderConfig(command=["server"])

        exit_code = run(config, {"SETTING": "foo::bar"}, static_provider)

        assert exit_code == 1
        assert not exec_recorder.called

    def test_missing_secret_ignored_still_launches(
        self, static_provider: StaticSecretProvider, exec_recorder: ExecCall
    ) -> None:
        config = LoaderConfig(ignore_missing=True, command=["server"])
        snapshot = {"TOKEN": "aws_sm::prod/missing", "HOME": "/root"}

        assert run(config, snapshot, static_provider) == 0
        assert exec_recorder.environment == {"HOME": "/root"}

    def test_dry_run_prints_redacted_environment(
        self,
        static_provider: StaticSecretProvider,
        exec_recorder: ExecCall,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        config = LoaderConfig(env_prefix="MYAPP_")
        snapshot = {
            "MYAPP_DB_PASSWORD": "aws_sm::prod/db/password",
            "MYAPP_DEBUG": "value::true",
            "DB_URL": "postgresql://app:db-secure-password@db/app",
        }

        assert run(config, snapshot, static_provider, dry_run=True) == 0

        out = capsys.readouterr().out.splitlines()
        assert out == [
            f"DB_PASSWORD={SecretRedactor.REDACTION_MARKER}",
            f"DB_URL=postgresql://app:{SecretRedactor.REDACTION_MARKER}@db/app",
            "DEBUG=true",
        ]
        assert not exec_recorder.called


class TestMain:
    def test_double_dash_is_dropped(
        self, monkeypatch: pytest.MonkeyPatch, exec_recorder: ExecCall
    ) -> None:
        monkeypatch.setenv("ENVLOADERTEST_GREETING", "value::hello")

        exit_code = main(["-e", "ENVLOADERTEST_", "--", "echo", "hi"])

        assert exit_code == 0
        assert exec_recorder.args == ["echo", "hi"]
        assert exec_recorder.environment["GREETING"] == "hello"

    def test_config_file_error_exits_2(
        self, tmp_path: Path, exec_recorder: ExecCall
    ) -> None:
        exit_code = main(["-c", str(tmp_path / "missing.yml"), "echo"])
        assert exit_code == 2
        assert not exec_recorder.called

    def test_config_file_applied(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, exec_recorder: ExecCall
    ) -> None:
        path = tmp_path / "env-loader.yml"
        path.write_text("env_prefix: ENVLOADERTEST_\n")
        monkeypatch.setenv("ENVLOADERTEST_MODE", "value::fast")

        assert main(["-c", str(path), "echo"]) == 0
        assert exec_recorder.environment["MODE"] == "fast"
        assert "ENVLOADERTEST_MODE" not in exec_recorder.environment

    def test_dry_run_without_command(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("ENVLOADERTEST_FLAG", "value::on")

        assert main(["--dry-run", "-e", "ENVLOADERTEST_"]) == 0
        assert "FLAG=on" in capsys.readouterr().out.splitlines()


class TestLaunch:
    def test_command_not_found(self) -> None:
        exit_code = launch(["env-loader-test-no-such-command"], {"PATH": "/nonexistent"})
        assert exit_code == EXIT_NOT_FOUND

    def test_tuple_command_passed_to_exec_as_list(self, exec_recorder: ExecCall) -> None:
        exit_code = launch(("server", "-v"), {"PATH": "/bin"})
        assert exit_code == 0
        assert exec_recorder.args == ["server", "-v"]
        assert isinstance(exec_recorder.args, list)

    def test_empty_command_rejected(self) -> None:
        with pytest.raises(ValueError, match="No command"):
            launch([], {})
