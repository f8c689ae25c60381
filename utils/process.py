import os
import shutil
import subprocess
import time
from dataclasses import dataclass
from typing import Dict, Any, FrozenSet, Iterable, Optional

from utils.error_handler import FatalError, FatalStartupError


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external invocation"""
    command: str
    exit_code: int
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def is_privileged() -> bool:
    """Return True when running as root"""
    try:
        return os.geteuid() == 0
    except (AttributeError, OSError) as e:
        raise FatalStartupError(f"Cannot determine privilege state: {e}")


def probe_tools(tools: Iterable[str]) -> FrozenSet[str]:
    """Return the subset of tools not found on PATH"""
    return frozenset(tool for tool in tools if shutil.which(tool) is None)


class CommandRunner:
    """Run shell commands, adding the elevation helper where needed"""

    def __init__(self, privileged: bool = False, sudo_command: str = "sudo",
                 timeout: int = 3600, logger=None):
        self.privileged = privileged
        self.sudo_command = sudo_command
        self.timeout = timeout
        self.logger = logger

    def wrap_with_sudo(self, command: str) -> str:
        """Prefix command with the elevation helper unless already root"""
        if self.privileged:
            return command
        return f"{self.sudo_command} {command}"

    def prepare_command(self, command: str, needs_sudo: bool,
                        handles_sudo_internally: bool = False) -> str:
        """
        Prepare command with appropriate sudo handling

        Args:
            command: Base command to run
            needs_sudo: Whether command needs elevated privileges
            handles_sudo_internally: Whether command calls sudo itself (like yay)
        """
        if not needs_sudo or handles_sudo_internally:
            return command
        return self.wrap_with_sudo(command)

    def run(self, command: str, options: Optional[Dict[str, Any]] = None) -> CommandResult:
        """
        Run one command to completion

        Output streams to the terminal unless options['capture'] is set.
        Returns exit code 127 when the shell cannot find the command and
        124 on timeout, mirroring the conventions of coreutils.
        """
        options = options or {}
        final_command = self.prepare_command(
            command,
            options.get('needs_sudo', False),
            options.get('handles_sudo_internally', False)
        )
        capture = options.get('capture', False)

        if self.logger:
            self.logger.log_command_start(final_command)
        start_time = time.time()
        executed = self._execute(final_command, capture)
        result = CommandResult(
            command=final_command,
            exit_code=executed.exit_code,
            stdout=executed.stdout,
            stderr=executed.stderr,
            duration=time.time() - start_time
        )
        if self.logger:
            self.logger.log_command_complete(final_command, result.exit_code, result.duration)
        return result

    def _execute(self, command: str, capture: bool) -> CommandResult:
        try:
            completed = subprocess.run(
                command,
                shell=True,
                capture_output=capture,
                text=True,
                timeout=self.timeout
            )
            return CommandResult(command, completed.returncode,
                                 completed.stdout, completed.stderr)
        except subprocess.TimeoutExpired:
            return CommandResult(command, 124, "",
                                 f"Command timed out after {self.timeout} seconds")
        except FileNotFoundError as e:
            return CommandResult(command, 127, "", str(e))
        except OSError as e:
            raise FatalError(f"Cannot start '{command}': {e}")
