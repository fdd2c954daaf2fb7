"""Tests for the update cluster command line entry point."""

from pathlib import Path
from typing import List, Optional

import pytest

import update_cluster_gke_terraform as cli_module
from gke_client.exceptions import RequirementsError, ToolExecutionError
from gke_client.models import GCloudSession, ToolResult, UpdateSettings


class FakeAuthenticator:
    instances: List["FakeAuthenticator"] = []

    def __init__(self, binary: str = "gcloud") -> None:
        self.binary = binary
        self.calls = []
        FakeAuthenticator.instances.append(self)

    def login(self, service_account: Optional[str] = None, skip_login: bool = False) -> GCloudSession:
        self.calls.append((service_account, skip_login))
        return GCloudSession(account="ops@example.com")


class FakeRunner:
    instances: List["FakeRunner"] = []
    fail_on: Optional[str] = None

    def __init__(self, binary: str = "terraform") -> None:
        self.binary = binary
        self.calls: List[str] = []
        FakeRunner.instances.append(self)

    def _record(self, step: str) -> ToolResult:
        self.calls.append(step)
        if step == FakeRunner.fail_on:
            raise ToolExecutionError([self.binary, step], 1, "Error: quota exceeded\n")
        return ToolResult(command=[self.binary, step], returncode=0)

    def init(self, plan_dir):
        return self._record("init")

    def plan(self, state_file, vars_file, plan_dir):
        return self._record("plan")

    def apply(self, state_file, vars_file, plan_dir):
        return self._record("apply")


@pytest.fixture
def required() -> List[str]:
    return []


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, required: List[str]) -> Path:
    FakeAuthenticator.instances = []
    FakeRunner.instances = []
    FakeRunner.fail_on = None

    monkeypatch.setattr(cli_module, "load_settings", lambda _config: UpdateSettings(operator_home=str(tmp_path)))
    monkeypatch.setattr(cli_module, "verify_requirements", lambda *binaries: required.extend(binaries))
    monkeypatch.setattr(cli_module, "GCloudAuthenticator", FakeAuthenticator)
    monkeypatch.setattr(cli_module, "TerraformRunner", FakeRunner)
    return tmp_path


def _provision(home: Path, name: str = "demo") -> None:
    cluster_dir = home / ".jx" / "clusters" / name
    (cluster_dir / "terraform").mkdir(parents=True)
    (cluster_dir / f"jx-{name}.key.json").write_text("{}", encoding="utf-8")


def test_parser_flags() -> None:
    args = cli_module.build_parser().parse_args(
        ["-n", "demo", "--skip-login", "--service-account", "/keys/sa.json", "-b"]
    )

    assert args.name == "demo"
    assert args.skip_login is True
    assert args.service_account == "/keys/sa.json"
    assert args.batch_mode is True
    assert args.verbose is False


def test_parser_defaults() -> None:
    args = cli_module.build_parser().parse_args([])

    assert args.name == ""
    assert args.skip_login is False
    assert args.service_account == ""
    assert args.batch_mode is False
    assert args.config is None


def test_help_mentions_plan_location() -> None:
    help_text = cli_module.build_parser().format_help()

    assert "~/.jx/clusters/<cluster>/terraform" in help_text
    assert "Runs on Google Cloud" in help_text


def test_batch_update_applies_and_exits_zero(home: Path, required: List[str]) -> None:
    _provision(home)

    exit_code = cli_module.main(["--name", "demo", "--batch-mode", "--skip-login"])

    assert exit_code == 0
    assert FakeRunner.instances[0].calls == ["init", "plan", "apply"]
    assert FakeAuthenticator.instances[0].calls == [(None, True)]
    assert required == ["gcloud", "terraform"]


def test_missing_name_exits_zero_without_terraform(home: Path) -> None:
    exit_code = cli_module.main(["--batch-mode"])

    assert exit_code == 0
    assert FakeAuthenticator.instances[0].calls == [(None, False)]
    assert FakeRunner.instances[0].calls == []


def test_unprovisioned_cluster_exits_zero(home: Path) -> None:
    exit_code = cli_module.main(["-n", "demo", "-b"])

    assert exit_code == 0
    assert FakeRunner.instances[0].calls == []


def test_tool_failure_exits_non_zero(home: Path) -> None:
    _provision(home)
    FakeRunner.fail_on = "plan"

    exit_code = cli_module.main(["-n", "demo", "-b"])

    assert exit_code == 1
    assert FakeRunner.instances[0].calls == ["init", "plan"]


def test_missing_binaries_exit_non_zero(home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def missing(*binaries):
        raise RequirementsError("Required command(s) not found on PATH: terraform")

    monkeypatch.setattr(cli_module, "verify_requirements", missing)

    assert cli_module.main(["-n", "demo", "-b"]) == 1
    assert FakeAuthenticator.instances == []


def test_service_account_flag_is_passed_to_login(home: Path) -> None:
    _provision(home)
    key = home / "sa.json"
    key.write_text("{}", encoding="utf-8")

    exit_code = cli_module.main(["-n", "demo", "-b", "--service-account", str(key)])

    assert exit_code == 0
    assert FakeAuthenticator.instances[0].calls == [(str(key), False)]


def test_cli_maps_keyboard_interrupt(monkeypatch: pytest.MonkeyPatch) -> None:
    def interrupted():
        raise KeyboardInterrupt

    monkeypatch.setattr(cli_module, "main", interrupted)

    with pytest.raises(SystemExit) as exc_info:
        cli_module.cli()

    assert exc_info.value.code == 130
