import os
import signal
import subprocess
import sys
import time
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from autons import cli
from autons.config import Config
from autons.errors import ClusterAccessError
from autons.tests.conftest import APPS_V1, CORE_V1, FakeCluster

runner = CliRunner()

def run_cli_command(cmd):
    return subprocess.run([sys.executable, "-m", "autons"] + cmd.split(), capture_output=True, text=True)


@pytest.fixture
def fake_cluster(monkeypatch):
    cluster = FakeCluster(objects={
        (CORE_V1, "pods"): [("web-7f9", "prod")],
        (APPS_V1, "deployments"): [("api", "team-a"), ("api", "team-b")],
    })
    seen = {}

    def fake_load(kubeconfig=None, context=None):
        seen["kubeconfig"], seen["context"] = kubeconfig, context
        return MagicMock()

    monkeypatch.setattr(cli, "load_api_client", fake_load)
    monkeypatch.setattr(cli, "ClusterClient", lambda api_client: cluster)
    cluster.seen = seen
    return cluster


@pytest.fixture
def kubectl(monkeypatch, kubectl_runs):
    monkeypatch.setattr(Config, "KUBECTL", "kubectl")
    return kubectl_runs.commands


def test_help():
    result = run_cli_command("--help")
    assert "Usage" in result.stdout
    assert "--debug" in result.stdout


def test_logs_gets_resolved_namespace(fake_cluster, kubectl):
    result = runner.invoke(cli.app, ["logs", "pod/web-7f9"])
    assert result.exit_code == 0, result.output
    assert kubectl == [["kubectl", "logs", "pod/web-7f9", "--namespace", "prod"]]


def test_ambiguous_deployment_fails(fake_cluster, kubectl):
    result = runner.invoke(cli.app, ["get", "deploy", "api"])
    assert result.exit_code == 5
    assert "team-a" in result.output and "team-b" in result.output
    assert kubectl == []


def test_not_found(fake_cluster, kubectl):
    result = runner.invoke(cli.app, ["get", "pods", "ghost"])
    assert result.exit_code == 4
    assert "ghost" in result.output


def test_explicit_namespace_skips_cluster_access(monkeypatch, kubectl):
    def fail(*args, **kwargs):
        raise AssertionError("cluster must not be contacted")

    monkeypatch.setattr(cli, "load_api_client", fail)
    result = runner.invoke(cli.app, ["get", "deploy", "api", "-n", "team-a", "-o", "yaml"])
    assert result.exit_code == 0
    assert kubectl == [["kubectl", "get", "deploy", "api", "-n", "team-a", "-o", "yaml"]]


def test_passthrough_keeps_flags_and_separator(fake_cluster, kubectl):
    result = runner.invoke(cli.app, ["exec", "pods/web-7f9", "-it", "--", "sh", "-c", "ls -n"])
    assert result.exit_code == 0, result.output
    assert kubectl == [[
        "kubectl", "exec", "pods/web-7f9", "-it", "--namespace", "prod", "--", "sh", "-c", "ls -n",
    ]]


def test_context_and_kubeconfig_flags_reach_the_loader(fake_cluster, kubectl):
    result = runner.invoke(
        cli.app,
        ["logs", "web-7f9", "--context", "staging", "--kubeconfig=/tmp/kc.yaml"],
    )
    assert result.exit_code == 0, result.output
    assert fake_cluster.seen == {"kubeconfig": "/tmp/kc.yaml", "context": "staging"}


def test_insufficient_arguments(kubectl):
    result = runner.invoke(cli.app, ["logs"])
    assert result.exit_code == 2
    assert "insufficient command" in result.output


def test_unknown_kind_is_usage_error(fake_cluster, kubectl):
    result = runner.invoke(cli.app, ["get", "widgets/foo"])
    assert result.exit_code == 2
    assert "widgets" in result.output


def test_cluster_access_error(monkeypatch, kubectl):
    def fail(*args, **kwargs):
        raise ClusterAccessError("Couldn't initialize client: no config")

    monkeypatch.setattr(cli, "load_api_client", fail)
    result = runner.invoke(cli.app, ["logs", "web-7f9"])
    assert result.exit_code == 3


def test_kubectl_exit_status_is_mirrored(fake_cluster, kubectl_runs):
    kubectl_runs.returncode = 42
    result = runner.invoke(cli.app, ["logs", "web-7f9"])
    assert result.exit_code == 42


def test_cluster_flags():
    assert cli.cluster_flags(["pods", "x", "--context=a", "--kubeconfig", "k"]) == ("k", "a")
    assert cli.cluster_flags(["pods", "x", "--", "--context", "a"]) == (None, None)


def test_short_debug_flag():
    result = run_cli_command("-d")
    assert result.returncode == 2
    assert "insufficient command" in result.stderr
    assert "Debug mode enabled" in result.stderr


@pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX process groups")
def test_ctrl_c_keeps_kubectl_exit_status(tmp_path):
    ready = tmp_path / "ready"
    fake_kubectl = tmp_path / "kubectl"
    fake_kubectl.write_text(
        "#!/bin/sh\n"
        "trap 'exit 0' INT\n"
        f"touch '{ready}'\n"
        "while true; do sleep 0.1; done\n"
    )
    fake_kubectl.chmod(0o755)

    process = subprocess.Popen(
        [sys.executable, "-m", "autons", "port-forward", "web", "8080", "-n", "prod"],
        env=dict(os.environ, AUTONS_KUBECTL=str(fake_kubectl)),
        start_new_session=True,
    )
    try:
        deadline = time.monotonic() + 30
        while not ready.exists():
            assert time.monotonic() < deadline, "kubectl stand-in never started"
            time.sleep(0.05)
        # Ctrl-C in a terminal signals the whole foreground process group
        os.killpg(process.pid, signal.SIGINT)
        assert process.wait(timeout=30) == 0
    finally:
        if process.poll() is None:
            process.kill()
