import pytest
import logging
import os
import tempfile
from dataclasses import replace
from unittest.mock import Mock

from actions.base import ActionContext
from actions.registry import build_registry
from config import Settings
from utils.process import CommandRunner, CommandResult


class FakeRunner(CommandRunner):
    """CommandRunner that records commands instead of running them"""

    def __init__(self, responses=None, **kwargs):
        super().__init__(**kwargs)
        self.responses = responses or {}
        self.calls = []

    def _execute(self, command, capture):
        self.calls.append(command)
        for fragment, (exit_code, stdout) in self.responses.items():
            if fragment in command:
                return CommandResult(command, exit_code, stdout, "")
        return CommandResult(command, 0, "" if capture else None, "" if capture else None)


@pytest.fixture(autouse=True)
def reset_archmaint_logger():
    """Handlers live on the shared 'archmaint' logger; start every test clean"""
    logger = logging.getLogger("archmaint")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    yield
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def make_runner():
    """Factory for FakeRunner instances with canned responses"""
    def factory(responses=None, privileged=False):
        return FakeRunner(responses, privileged=privileged)
    return factory


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def settings(tmp_path):
    """Settings for a non-root user with every tool installed"""
    return Settings(privileged=False, missing_tools=frozenset(), home=tmp_path)


@pytest.fixture
def make_context(settings):
    def factory(runner, output=None, **overrides):
        current = replace(settings, **overrides)
        lines = [] if output is None else output
        return ActionContext(current, runner, lines.append)
    return factory


@pytest.fixture
def mock_logger():
    """Mock logger for testing"""
    logger = Mock()
    logger.info = Mock()
    logger.warning = Mock()
    logger.error = Mock()
    logger.debug = Mock()
    logger.log_run_start = Mock()
    logger.log_run_complete = Mock()
    logger.log_command_start = Mock()
    logger.log_command_complete = Mock()
    logger.log_action_start = Mock()
    logger.log_action_complete = Mock()
    return logger


@pytest.fixture
def sample_config_yaml():
    """Sample YAML configuration content"""
    return """
settings:
  log_level: DEBUG
  command_timeout: 600
  sudo_command: doas

confirmation:
  destructive:
    - remove_orphans
    - clear_pacman_cache
  default_answer: n

reflector:
  country: Romania
  latest: 10

journal:
  vacuum_time: 2weeks
"""


@pytest.fixture
def temp_config_file(sample_config_yaml):
    """Create a temporary config file for testing"""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        f.write(sample_config_yaml)
        temp_path = f.name

    yield temp_path

    if os.path.exists(temp_path):
        os.unlink(temp_path)


@pytest.fixture
def mock_subprocess_run():
    """Mock subprocess.run result"""
    result = Mock()
    result.returncode = 0
    result.stdout = "mock output"
    result.stderr = ""
    return result
