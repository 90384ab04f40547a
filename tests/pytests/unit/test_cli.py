"""
Unit tests for saltapi/cli.py
"""

import json
from unittest.mock import patch

import pytest
import yaml

import saltapi.cli
import saltapi.exitcodes
from tests.support.helpers import ENDPOINT, make_response


@pytest.fixture
def password_file(tmp_path):
    path = tmp_path / "api.pass"
    path.write_text("saltdev\n", encoding="utf-8")
    return str(path)


@pytest.fixture
def base_args(tmp_path, password_file):
    return [
        "-c",
        str(tmp_path / "missing-config"),
        "-e",
        ENDPOINT,
        "-u",
        "saltdev",
        "--password-file",
        password_file,
    ]


@pytest.fixture
def run(salt_api):
    def _run(args):
        with patch("saltapi.client._build_session", return_value=salt_api.session):
            return saltapi.cli.SaltAPICall().run(args)

    return _run


def test_parse_input():
    arg, kwarg = saltapi.cli.parse_input(
        ["uptime", "runas=nobody", "a==b", "=value", "cwd=/tmp=x", "1st=no"]
    )
    assert arg == ["uptime", "a==b", "=value", "1st=no"]
    assert kwarg == {"runas": "nobody", "cwd": "/tmp=x"}


def test_run_local(run, salt_api, base_args, capsys):
    assert run(base_args + ["web*", "cmd.run", "uptime", "runas=nobody"]) == 0

    (login,) = salt_api.login_calls
    assert login.kwargs["data"] == "username=saltdev&password=saltdev&eauth=pam"
    (command,) = salt_api.command_calls
    assert json.loads(command.kwargs["data"]) == {
        "client": "local",
        "tgt": "web*",
        "fun": "cmd.run",
        "arg": ["uptime"],
        "kwarg": {"runas": "nobody"},
    }
    assert yaml.safe_load(capsys.readouterr().out) == {
        "return": [{"web1": True, "web2": True}]
    }


def test_run_ping(run, salt_api, base_args):
    assert run(base_args + ["--ping"]) == 0
    (command,) = salt_api.command_calls
    assert json.loads(command.kwargs["data"])["fun"] == "test.ping"


@pytest.mark.parametrize("client", ["runner", "wheel"])
def test_run_master_clients(run, salt_api, base_args, client):
    assert run(base_args + ["--client", client, "jobs.lookup_jid", "jid=1"]) == 0
    (command,) = salt_api.command_calls
    payload = json.loads(command.kwargs["data"])
    assert payload["client"] == client
    assert payload["tgt"] == ""
    assert payload["fun"] == "jobs.lookup_jid"
    assert payload["kwarg"] == {"jid": "1"}


def test_run_json_output(run, base_args, capsys):
    assert run(base_args + ["--out", "json", "*", "test.ping"]) == 0
    assert json.loads(capsys.readouterr().out) == {
        "return": [{"web1": True, "web2": True}]
    }


def test_run_async_streams_raw_body(run, salt_api, base_args, capsys):
    salt_api.command_response = make_response(200, '{"return": [{"jid": "2024"}]}')
    assert run(base_args + ["--async", "*", "test.ping"]) == 0
    assert capsys.readouterr().out == '{"return": [{"jid": "2024"}]}\n'
    (command,) = salt_api.command_calls
    assert command.kwargs["stream"] is True


def test_run_reads_config_file(run, salt_api, tmp_path, password_file):
    config = tmp_path / "saltapirc"
    config.write_text(
        "endpoint: {}/\nuser: fromfile\npass: filepass\neauth: ldap\n".format(
            ENDPOINT
        ),
        encoding="utf-8",
    )
    assert run(["-c", str(config), "*", "test.ping"]) == 0
    (login,) = salt_api.login_calls
    assert login.args == (ENDPOINT + "/login",)
    assert login.kwargs["data"] == "username=fromfile&password=filepass&eauth=ldap"


def test_run_missing_endpoint(run, tmp_path, salt_api):
    assert (
        run(["-c", str(tmp_path / "missing"), "-u", "saltdev", "*", "test.ping"])
        == saltapi.exitcodes.EX_CONFIG
    )
    assert not salt_api.calls


def test_run_login_failure(run, salt_api, base_args):
    salt_api.login_response = make_response(401, "Unauthorized")
    assert run(base_args + ["*", "test.ping"]) == saltapi.exitcodes.EX_NOPERM


def test_run_error_status(run, salt_api, base_args):
    salt_api.command_response = make_response(500, "Internal Server Error")
    assert run(base_args + ["*", "test.ping"]) == saltapi.exitcodes.EX_PROTOCOL


@pytest.mark.parametrize(
    "args",
    [
        ["*"],
        [],
        ["--client", "runner"],
    ],
)
def test_run_usage_errors(run, base_args, args):
    with pytest.raises(SystemExit) as excinfo:
        run(base_args + args)
    assert excinfo.value.code == 2


def test_salt_api_call_exits(salt_api, base_args):
    with patch("sys.argv", ["saltapi"] + base_args + ["*", "test.ping"]), patch(
        "saltapi.client._build_session", return_value=salt_api.session
    ):
        with pytest.raises(SystemExit) as excinfo:
            saltapi.cli.salt_api_call()
    assert excinfo.value.code == 0


def test_run_invalid_json_reply(run, salt_api, base_args):
    salt_api.command_response = make_response(200, "<html>proxy</html>")
    assert run(base_args + ["*", "test.ping"]) == saltapi.exitcodes.EX_PROTOCOL


def test_run_missing_password_file(run, salt_api, base_args, tmp_path):
    base_args[base_args.index("--password-file") + 1] = str(tmp_path / "missing")
    assert run(base_args + ["*", "test.ping"]) == saltapi.exitcodes.EX_CONFIG
    assert not salt_api.calls
