"""Run kubectl against a cluster using a kubeconfig held only in memory."""

import os
import re
import shlex
import subprocess
import tempfile

from pydantic import BaseModel

from aks_manager.exceptions import KubectlError
from aks_manager.logging_config import get_logger
from aks_manager.result import Result

logger = get_logger(__name__)

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]|\x1b\][^\x07]*(\x07|\x1b\\)")


def strip_ansi(text: str) -> str:
    """Remove ANSI colour and cursor escape sequences."""
    return ANSI_ESCAPE.sub("", text)


class KubectlOutput(BaseModel):
    """Captured output of a kubectl run."""

    exit_code: int
    stdout: str
    stderr: str = ""


class KubectlRunner:
    """Invokes the kubectl binary with a temporary kubeconfig file."""

    def __init__(self, kubectl_path: str = "kubectl", timeout: int = 60):
        self.kubectl_path = kubectl_path
        self.timeout = timeout

    def run(self, kubeconfig_yaml: str, args: str) -> Result[KubectlOutput]:
        """
        Run ``kubectl <args>`` against the cluster described by ``kubeconfig_yaml``.

        The kubeconfig is written to a temporary file that is deleted once
        the command finishes.

        Args:
            kubeconfig_yaml: Kubeconfig contents
            args: kubectl arguments without the ``kubectl`` prefix

        Returns:
            Result with the captured output (ANSI codes stripped), or KubectlError
        """
        fd, kubeconfig_path = tempfile.mkstemp(prefix="aks-kubeconfig-", suffix=".yaml")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(kubeconfig_yaml)
            return self._invoke(kubeconfig_path, args)
        finally:
            try:
                os.unlink(kubeconfig_path)
            except OSError as e:
                logger.warning(f"Failed to remove temporary kubeconfig {kubeconfig_path}: {e}")

    def _invoke(self, kubeconfig_path: str, args: str) -> Result[KubectlOutput]:
        command = [self.kubectl_path, "--kubeconfig", kubeconfig_path] + shlex.split(args)
        logger.debug(f"Executing kubectl command: kubectl {args}")

        try:
            result = subprocess.run(command, capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            logger.error(f"kubectl command timed out after {self.timeout} seconds: {args}")
            return Result.fail(
                KubectlError(
                    f"Command timed out after {self.timeout} seconds: kubectl {args}",
                    "Increase kubectl_timeout in the configuration or check cluster connectivity",
                )
            )
        except FileNotFoundError:
            logger.error(f"kubectl binary not found: {self.kubectl_path}")
            return Result.fail(
                KubectlError(
                    "kubectl is not installed or not in PATH",
                    "Install kubectl from https://kubernetes.io/docs/tasks/tools/\n"
                    "Or set kubectl_path in the configuration",
                )
            )

        logger.debug(f"kubectl command completed with exit code {result.returncode}")

        if result.returncode != 0:
            return Result.fail(
                KubectlError(
                    f"kubectl {args} failed with exit code {result.returncode}",
                    strip_ansi(result.stderr).strip() or None,
                )
            )

        return Result.ok(
            KubectlOutput(
                exit_code=result.returncode,
                stdout=strip_ansi(result.stdout),
                stderr=strip_ansi(result.stderr),
            )
        )
