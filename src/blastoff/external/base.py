"""Subprocess plumbing shared by the WU-BLAST wrappers."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence

from packaging import version

from blastoff.exceptions import ExternalToolError
from blastoff.utils.logging import get_logger


class ExternalTool:
    """A command line program found on PATH.

    Subclasses set ``tool_name`` and, where a release floor matters,
    ``min_version``. WU-BLAST programs have no ``--version`` flag; they print
    a banner such as ``xdformat 2.0MP-WashU [04-May-2006]`` when run bare,
    and that banner is what gets checked.
    """

    tool_name: str = ""
    min_version: Optional[str] = None
    banner_regex = r"(\d+\.\d+(?:\.\d+)*)"

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger(f"external.{self.tool_name}")
        self.path = shutil.which(self.tool_name)
        if self.path is None:
            raise ExternalToolError(
                f"{self.tool_name} not found in PATH. "
                "Please install WU-BLAST and make sure its tools are on PATH"
            )
        if self.min_version:
            self._check_version()

    def banner_version(self) -> Optional[str]:
        """Version number from the tool's usage banner, if it prints one."""
        try:
            probe = subprocess.run(
                [self.tool_name], capture_output=True, text=True, check=False, timeout=10
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            self.logger.debug(f"Could not probe {self.tool_name}: {e}")
            return None
        match = re.search(self.banner_regex, probe.stdout + probe.stderr)
        return match.group(1) if match else None

    def _check_version(self) -> None:
        found = self.banner_version()
        if found is None:
            self.logger.warning(
                f"Could not read a version from {self.tool_name}; "
                f"expected {self.min_version} or later"
            )
            return
        if version.parse(found) < version.parse(self.min_version):
            raise ExternalToolError(
                f"{self.tool_name} {found} is older than the required {self.min_version}"
            )
        self.logger.debug(f"{self.tool_name} {found} at {self.path}")

    def run(self, cmd: Sequence[str], cwd: Optional[Path] = None) -> str:
        """Run ``cmd`` to completion and return its stdout.

        Raises:
            ExternalToolError: on a non-zero exit or when the program cannot start
        """
        cmd_str = " ".join(str(c) for c in cmd)
        self.logger.debug(f"Running: {cmd_str}")
        try:
            result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            self._log_failure(cmd_str, e.returncode, e.stderr)
            raise ExternalToolError(
                f"{self.tool_name} failed", command=cmd, returncode=e.returncode, stderr=e.stderr
            )
        except OSError as e:
            self.logger.error(f"Could not start {cmd_str}: {e}")
            raise ExternalToolError(
                f"Failed to execute {self.tool_name}", command=cmd, returncode=-1, stderr=str(e)
            )
        if result.stderr:
            self.logger.debug(f"{self.tool_name} stderr: {result.stderr[:500]}")
        return result.stdout

    def _log_failure(self, cmd_str: str, returncode: int, stderr: Optional[str]) -> None:
        self.logger.error(f"Command failed ({returncode}): {cmd_str}")
        if stderr:
            self.logger.error(stderr[:1000])

    @contextmanager
    def stream(self, cmd: Sequence[str], cwd: Optional[Path] = None) -> Iterator[Iterator[str]]:
        """Run ``cmd`` and yield an iterator over its stdout lines.

        The process is reaped when the block exits. If the block raises, the
        process is killed and the block's exception propagates; otherwise a
        non-zero exit raises ExternalToolError.
        """
        cmd_str = " ".join(str(c) for c in cmd)
        self.logger.info(f"Running: {cmd_str}")

        # stderr is spooled to disk so the child never blocks on a full pipe
        with tempfile.TemporaryFile(mode="w+", encoding="utf-8") as err_spool:
            try:
                proc = subprocess.Popen(
                    cmd, cwd=cwd, stdout=subprocess.PIPE, stderr=err_spool, text=True
                )
            except OSError as e:
                self.logger.error(f"Could not start {cmd_str}: {e}")
                raise ExternalToolError(
                    f"Failed to execute {self.tool_name}", command=cmd, returncode=-1, stderr=str(e)
                )

            with proc:
                try:
                    yield iter(proc.stdout)
                except BaseException:
                    proc.kill()
                    raise
                proc.communicate()

            err_spool.seek(0)
            stderr = err_spool.read()

        if proc.returncode != 0:
            self._log_failure(cmd_str, proc.returncode, stderr)
            raise ExternalToolError(
                f"{self.tool_name} failed", command=list(cmd), returncode=proc.returncode, stderr=stderr
            )
        if stderr:
            self.logger.debug(f"{self.tool_name} stderr: {stderr[:500]}")
