import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, FrozenSet, List, Optional

from utils.error_handler import ConfigurationError


DEFAULT_DESTRUCTIVE = ("remove_orphans", "update_firmware")


@dataclass(frozen=True)
class ReflectorSettings:
    country: Optional[str] = None
    protocol: str = "https"
    age: int = 12
    latest: int = 20
    sort: str = "rate"
    save: str = "/etc/pacman.d/mirrorlist"


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, computed once at startup"""
    privileged: bool = False
    sudo_command: str = "sudo"
    missing_tools: FrozenSet[str] = frozenset()
    interactive: bool = True
    dry_run: bool = False
    destructive: FrozenSet[str] = frozenset(DEFAULT_DESTRUCTIVE)
    default_answer: str = "n"
    command_timeout: int = 3600
    reflector: ReflectorSettings = field(default_factory=ReflectorSettings)
    journal_vacuum_time: str = "4weeks"
    home: Path = field(default_factory=Path.home)

    def has_tool(self, tool: str) -> bool:
        return tool not in self.missing_tools

    def missing_for(self, action) -> List[str]:
        """Tools an action needs that are absent, elevation helper included"""
        missing = sorted(set(action.required_tools) & self.missing_tools)
        if action.privileged and not self.privileged and self.sudo_command in self.missing_tools:
            missing.append(self.sudo_command)
        return missing

    def requires_confirmation(self, action) -> bool:
        return self.interactive and action.name in self.destructive


class ConfigParser:
    def __init__(self, config_path: Optional[str] = None):
        self.explicit = config_path is not None
        if config_path is None:
            config_path = self._find_default_config()
        self.config_path = Path(config_path).expanduser()
        self._config = None

    def _find_default_config(self) -> str:
        possible_paths = [
            "config.yaml",
            "~/.config/archmaint/config.yaml",
            "/etc/archmaint/config.yaml"
        ]

        for path in possible_paths:
            expanded_path = Path(path).expanduser()
            if expanded_path.exists():
                return str(expanded_path)

        return "config.yaml"

    def load_config(self) -> Dict[str, Any]:
        if self._config is not None:
            return self._config

        if not self.config_path.exists():
            if self.explicit:
                raise ConfigurationError(f"Config file not found: {self.config_path}")
            self._config = {}
            return self._config

        try:
            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {self.config_path}: {e}")

        self._config = {} if loaded is None else loaded
        self._validate_config()
        return self._config

    def _validate_config(self):
        if not isinstance(self._config, dict):
            raise ConfigurationError("Config must be a mapping")

        for section in ('settings', 'confirmation', 'reflector', 'journal'):
            value = self._config.get(section, {})
            if not isinstance(value, dict):
                raise ConfigurationError(f"'{section}' must be a mapping")

        confirmation = self._config.get('confirmation', {})
        destructive = confirmation.get('destructive')
        if destructive is not None and not isinstance(destructive, list):
            raise ConfigurationError("'confirmation.destructive' must be a list of action names")

        default_answer = str(confirmation.get('default_answer', 'n')).lower()
        if default_answer not in ('y', 'n'):
            raise ConfigurationError("'confirmation.default_answer' must be 'y' or 'n'")

        timeout = self.get_settings().get('command_timeout', 3600)
        if not isinstance(timeout, int) or timeout <= 0:
            raise ConfigurationError("'settings.command_timeout' must be a positive integer")

    def validate_action_names(self, known_names):
        """Reject destructive entries that do not name a registered action"""
        unknown = sorted(set(self.get_destructive() or ()) - set(known_names))
        if unknown:
            raise ConfigurationError(f"Unknown action name(s) in confirmation.destructive: {', '.join(unknown)}")

    def get_settings(self) -> Dict[str, Any]:
        config = self.load_config()
        return config.get('settings', {})

    def get_destructive(self) -> Optional[List[str]]:
        """Configured destructive action names, None when not overridden"""
        config = self.load_config()
        destructive = config.get('confirmation', {}).get('destructive')
        return None if destructive is None else list(destructive)

    def get_default_answer(self) -> str:
        config = self.load_config()
        return str(config.get('confirmation', {}).get('default_answer', 'n')).lower()

    def get_reflector_settings(self) -> ReflectorSettings:
        config = self.load_config()
        section = config.get('reflector', {})
        known = ReflectorSettings.__dataclass_fields__
        unknown = sorted(set(section) - set(known))
        if unknown:
            raise ConfigurationError(f"Unknown reflector option(s): {', '.join(unknown)}")
        return ReflectorSettings(**section)

    def get_journal_vacuum_time(self) -> str:
        config = self.load_config()
        return str(config.get('journal', {}).get('vacuum_time', '4weeks'))

    def build_settings(self, privileged: bool, missing_tools: FrozenSet[str],
                       interactive: bool = True, dry_run: bool = False,
                       default_destructive=DEFAULT_DESTRUCTIVE) -> Settings:
        settings = self.get_settings()
        destructive = self.get_destructive()
        if destructive is None:
            destructive = default_destructive
        return Settings(
            privileged=privileged,
            sudo_command=settings.get('sudo_command', 'sudo'),
            missing_tools=frozenset(missing_tools),
            interactive=interactive,
            dry_run=dry_run,
            destructive=frozenset(destructive),
            default_answer=self.get_default_answer(),
            command_timeout=settings.get('command_timeout', 3600),
            reflector=self.get_reflector_settings(),
            journal_vacuum_time=self.get_journal_vacuum_time(),
        )
