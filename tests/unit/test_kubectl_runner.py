"""Unit tests for the kubectl runner."""

import os
import subprocess
from unittest.mock import Mock, patch

from aks_manager.exceptions import KubectlError
from aks_manager.kubectl import KubectlRunner, strip_ansi

KUBECONFIG = "apiVersion: v1\nkind: Config\n"


def completed(returncode=0, stdout="", stderr=""):
    result = Mock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


def test_strip_ansi():
    coloured = "\x1b[0;32mKubernetes control plane\x1b[0m is running at \x1b[0;33mhttps://x\x1b[0m"

    assert strip_ansi(coloured) == "Kubernetes control plane is running at https://x"


def test_strip_ansi_leaves_plain_text():
    assert strip_ansi("NAME   STATUS\nnode-1 Ready") == "NAME   STATUS\nnode-1 Ready"


def test_run_passes_temporary_kubeconfig():
    """The kubeconfig is written to a file that exists only while kubectl runs."""
    seen = {}

    def fake_run(command, **kwargs):
        path = command[command.index("--kubeconfig") + 1]
        seen["path"] = path
        with open(path) as f:
            seen["contents"] = f.read()
        return completed(stdout="\x1b[32mok\x1b[0m")

    with patch("subprocess.run", side_effect=fake_run) as mock_run:
        result = KubectlRunner(timeout=30).run(KUBECONFIG, "get pods --all-namespaces -o json")

    assert result.succeeded
    assert result.result.stdout == "ok"
    assert seen["contents"] == KUBECONFIG
    assert not os.path.exists(seen["path"])

    command = mock_run.call_args[0][0]
    assert command[0] == "kubectl"
    assert command[3:] == ["get", "pods", "--all-namespaces", "-o", "json"]
    assert mock_run.call_args[1]["capture_output"] is True
    assert mock_run.call_args[1]["text"] is True
    assert mock_run.call_args[1]["timeout"] == 30


def test_run_uses_configured_binary():
    with patch("subprocess.run", return_value=completed()) as mock_run:
        KubectlRunner(kubectl_path="/usr/local/bin/kubectl").run(KUBECONFIG, "get node")

    assert mock_run.call_args[0][0][0] == "/usr/local/bin/kubectl"


def test_run_nonzero_exit():
    with patch("subprocess.run", return_value=completed(1, stderr="Unable to connect")):
        result = KubectlRunner().run(KUBECONFIG, "get node")

    assert isinstance(result.error, KubectlError)
    assert "exit code 1" in result.message
    assert result.error.details == "Unable to connect"


def test_run_timeout():
    with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("kubectl", 60)):
        result = KubectlRunner().run(KUBECONFIG, "get node")

    assert isinstance(result.error, KubectlError)
    assert "timed out after 60 seconds" in result.message


def test_run_kubectl_not_installed():
    with patch("subprocess.run", side_effect=FileNotFoundError()):
        result = KubectlRunner().run(KUBECONFIG, "get node")

    assert isinstance(result.error, KubectlError)
    assert "kubectl is not installed" in result.message


def test_temporary_kubeconfig_removed_on_failure():
    seen = {}

    def fake_run(command, **kwargs):
        seen["path"] = command[command.index("--kubeconfig") + 1]
        raise FileNotFoundError()

    with patch("subprocess.run", side_effect=fake_run):
        KubectlRunner().run(KUBECONFIG, "get node")

    assert not os.path.exists(seen["path"])
