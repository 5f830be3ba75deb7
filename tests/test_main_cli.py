import main as main_module
from main import _parse_args
from useradmin.client import UsersAPIError
from useradmin.config import Settings
from useradmin.models import UserSummary


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "0.0.0.0", "--port", "8080"])
    assert args.command == "serve"
    assert args.host == "0.0.0.0"
    assert args.port == 8080


def test_list_users_subcommand_accepts_config() -> None:
    args = _parse_args(["list-users", "--config", "settings.yaml"])
    assert args.command == "list-users"
    assert args.config == "settings.yaml"


def test_list_users_prints_table(monkeypatch, capsys) -> None:
    async def fake_fetch(settings):
        return [UserSummary(id=1, name="Ann Lee", username="ann1", email="ann@x.com")]

    monkeypatch.setattr(main_module, "_fetch_users", fake_fetch)

    assert main_module._list_users(Settings()) == 0

    output = capsys.readouterr().out
    assert "1 user(s) found:" in output
    assert "ann@x.com" in output


def test_list_users_reports_api_failure(monkeypatch, capsys) -> None:
    async def failing_fetch(settings):
        raise UsersAPIError("Failed to contact users API: offline")

    monkeypatch.setattr(main_module, "_fetch_users", failing_fetch)

    assert main_module._list_users(Settings()) == 1
    assert "offline" in capsys.readouterr().out
