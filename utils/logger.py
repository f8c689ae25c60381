import logging
import sys
from pathlib import Path
from typing import Optional


class ArchMaintLogger:
    def __init__(self, log_level: str = "INFO", log_file: Optional[str] = None,
                 console_output: bool = False):
        self.logger = logging.getLogger("archmaint")
        self.logger.setLevel(getattr(logging, log_level.upper()))

        if not self.logger.handlers:
            self._setup_handlers(log_file, console_output)

    def _setup_handlers(self, log_file: Optional[str], console_output: bool):
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # The menu owns stdout; log records go to stderr and only when asked for
        if console_output:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if log_file:
            log_path = Path(log_file).expanduser()
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_path)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)

    def debug(self, message: str):
        self.logger.debug(message)

    def log_run_start(self, mode: str):
        self.info(f"Starting {mode} maintenance run")

    def log_run_complete(self, mode: str, duration: float):
        self.info(f"Completed {mode} maintenance run in {duration:.2f}s")

    def log_command_start(self, command: str):
        self.debug(f"Executing command: {command}")

    def log_command_complete(self, command: str, exit_code: int, duration: float):
        if exit_code == 0:
            self.debug(f"Command completed successfully: {command} ({duration:.2f}s)")
        else:
            self.error(f"Command failed with exit code {exit_code}: {command} ({duration:.2f}s)")

    def log_action_start(self, action_name: str):
        self.info(f"Starting action: {action_name}")

    def log_action_complete(self, action_name: str, outcome: str, duration: float):
        if outcome == "failed":
            self.error(f"Action failed: {action_name} ({duration:.2f}s)")
        else:
            self.info(f"Action {action_name} finished: {outcome} ({duration:.2f}s)")


def get_logger(log_level: str = "INFO", log_file: Optional[str] = None,
               console_output: bool = False) -> ArchMaintLogger:
    """Get a configured logger instance"""
    return ArchMaintLogger(log_level, log_file, console_output)
