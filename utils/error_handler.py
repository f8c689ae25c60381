import logging
from pathlib import Path
from typing import Optional, Dict, Any, Iterable


PACMAN_LOCK_FILE = Path("/var/lib/pacman/db.lck")


class MaintenanceError(Exception):
    """Base exception for archmaint errors"""
    pass


class ConfigurationError(MaintenanceError):
    """Configuration-related errors"""
    pass


class MissingToolError(MaintenanceError):
    """A required external command is not installed"""

    def __init__(self, tools: Iterable[str]):
        self.tools = sorted(tools)
        super().__init__(f"missing {', '.join(self.tools)}")


class ActionFailure(MaintenanceError):
    """An external command returned a non-zero exit status"""

    def __init__(self, message: str, exit_code: Optional[int] = None,
                 command: Optional[str] = None):
        super().__init__(message)
        self.exit_code = exit_code
        self.command = command


class NothingToDo(MaintenanceError):
    """Expected empty result, reported as information"""
    pass


class NoOrphans(NothingToDo):
    pass


class NoUpdatesAvailable(NothingToDo):
    pass


class InvalidSelection(MaintenanceError):
    """Unrecognized menu input"""
    pass


class ActionNotFound(InvalidSelection, LookupError):
    """Id is not a registered action"""
    pass


class FatalError(MaintenanceError):
    """The process cannot continue"""
    pass


class FatalStartupError(FatalError):
    """Unrecoverable condition before any action runs"""
    pass


class ErrorHandler:
    """Turn failed command results into log entries with suggestions"""

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)
        self.error_counts = {}

    def handle_config_error(self, error: Exception, config_path: str) -> Dict[str, Any]:
        """Handle configuration errors with helpful suggestions"""
        self.logger.error(f"Configuration error in {config_path}: {error}")

        suggestions = []
        error_msg = str(error).lower()

        if "yaml" in error_msg or "syntax" in error_msg or "mapping" in error_msg:
            suggestions.append("Check YAML syntax in config file")
            suggestions.append("Ensure proper indentation and no tabs")
        elif "unknown action" in error_msg:
            suggestions.append("Use action names as listed in config.example.yaml")
        elif "must be" in error_msg:
            suggestions.append("See config.example.yaml for the expected types")

        return {
            'error_type': 'configuration',
            'error_message': str(error),
            'suggestions': suggestions,
            'recoverable': False
        }

    def handle_command_error(self, command: str, exit_code: int, action_name: str,
                             stderr: Optional[str] = None) -> Dict[str, Any]:
        """Handle a failed command with context-aware suggestions"""
        self.logger.error(f"Command failed in {action_name}: {command} (exit code: {exit_code})")
        if stderr:
            self.logger.error(f"Error output: {stderr.strip()}")

        suggestions = []
        error_msg = (stderr or "").lower()
        tool = command.split()[0] if command else ""
        if tool == "sudo" and len(command.split()) > 1:
            tool = command.split()[1]

        if exit_code == 127 or "command not found" in error_msg:
            if tool == "paccache":
                suggestions.append("Install pacman-contrib: pacman -S pacman-contrib")
            elif tool == "fwupdmgr":
                suggestions.append("Install fwupd: pacman -S fwupd")
            else:
                suggestions.append(f"Install required tool for command: {command}")
        elif exit_code == 124:
            suggestions.append("Command timed out; raise command_timeout in config")
        elif tool in ("pacman", "yay"):
            if PACMAN_LOCK_FILE.exists() or "lock" in error_msg:
                suggestions.append(f"Remove {PACMAN_LOCK_FILE} if no pacman is running")
            elif "signature" in error_msg or "keyring" in error_msg:
                suggestions.append("Update archlinux-keyring: pacman -Sy archlinux-keyring")
            elif "conflict" in error_msg:
                suggestions.append("Resolve package conflicts manually")
        elif tool == "reflector":
            suggestions.append("Check internet connectivity")
            suggestions.append("Relax reflector filters (country, age) in config")
        elif "permission denied" in error_msg:
            suggestions.append("Check sudo configuration")

        self.error_counts[action_name] = self.error_counts.get(action_name, 0) + 1

        for suggestion in suggestions:
            self.logger.info(f"Suggestion: {suggestion}")

        return {
            'error_type': 'command_execution',
            'command': command,
            'exit_code': exit_code,
            'action_name': action_name,
            'suggestions': suggestions,
            'recoverable': exit_code != 127
        }

    def log_error_summary(self, errors: list):
        """Log a summary of all errors encountered"""
        if not errors:
            return

        self.logger.error(f"Encountered {len(errors)} error(s) during execution:")

        error_types = {}
        for error in errors:
            error_type = error.get('error_type', 'unknown')
            error_types[error_type] = error_types.get(error_type, 0) + 1

        for error_type, count in error_types.items():
            self.logger.error(f"  {error_type}: {count} error(s)")
