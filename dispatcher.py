import sys
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Tuple

from actions.base import Action, ActionContext, ActionResult, Outcome, find_failed
from actions.registry import EXIT_ID, ActionRegistry
from config import Settings
from utils.error_handler import (ActionFailure, ActionNotFound, ErrorHandler, FatalError,
                                 MaintenanceError, MissingToolError, NothingToDo)
from utils.logger import get_logger
from utils.process import CommandRunner
from utils.reporter import RunReporter

PERFORM_ALL_ID = 13

TAGS = {
    Outcome.SUCCESS: "[SUCCESS]",
    Outcome.FAILED: "[ERROR]",
    Outcome.SKIPPED: "[SKIPPED]",
    Outcome.NOTHING_TO_DO: "[INFO]",
}


class State(Enum):
    MENU = "menu"
    EXECUTING = "executing"
    EXIT = "exit"


class EffectKind(Enum):
    SHOW_MENU = "show_menu"
    RUN = "run"
    RUN_ALL = "run_all"
    INVALID = "invalid"
    EXIT = "exit"


@dataclass(frozen=True)
class Effect:
    kind: EffectKind
    action: Optional[Action] = None
    message: str = ""


def transition(state: State, user_input: Optional[str],
               registry: ActionRegistry) -> Tuple[State, Effect]:
    """
    Pure menu transition function.

    MENU reads a choice, EXECUTING always returns to MENU once the
    effect has been carried out, EXIT is absorbing.
    """
    if state is State.EXIT:
        return State.EXIT, Effect(EffectKind.EXIT)
    if state is State.EXECUTING:
        return State.MENU, Effect(EffectKind.SHOW_MENU)

    choice = (user_input or "").strip()
    if choice == str(EXIT_ID):
        return State.EXIT, Effect(EffectKind.EXIT)
    if choice == str(PERFORM_ALL_ID):
        return State.EXECUTING, Effect(EffectKind.RUN_ALL)

    try:
        action = registry.lookup(choice)
    except ActionNotFound as e:
        return State.MENU, Effect(EffectKind.INVALID, message=str(e))
    return State.EXECUTING, Effect(EffectKind.RUN, action=action)


def _print_error(message: str):
    print(message, file=sys.stderr)


class Dispatcher:
    """Drive the menu or the one-shot run and own the confirmation policy"""

    def __init__(self, registry: ActionRegistry, settings: Settings, runner: CommandRunner,
                 logger=None, input_func: Callable[[str], str] = input,
                 output: Callable[[str], None] = print,
                 error_output: Callable[[str], None] = _print_error):
        self.registry = registry
        self.settings = settings
        self.runner = runner
        self.logger = logger or get_logger()
        self.input_func = input_func
        self.output = output
        self.error_output = error_output
        self.error_handler = ErrorHandler(self.logger)
        self.errors = []

    def render_menu(self) -> str:
        lines = ["", "Select an action:"]
        for action in self.registry.all():
            line = f"{action.id:>2}) {action.label}"
            missing = self.settings.missing_for(action)
            if missing:
                line += f" (unavailable: {', '.join(missing)} missing)"
            lines.append(line)
        lines.append(f"{PERFORM_ALL_ID:>2}) Perform all tasks")
        lines.append(f"{EXIT_ID:>2}) Exit")
        return "\n".join(lines)

    def confirm(self, action: Action) -> bool:
        """Ask before a destructive action; only y/Y (or an affirmative default) proceeds"""
        default = self.settings.default_answer
        hint = "[Y/n]" if default == "y" else "[y/N]"
        try:
            reply = self.input_func(f"{action.label}: proceed? {hint} ").strip()
        except EOFError:
            return False
        if not reply:
            reply = default
        return reply in ("y", "Y")

    def report(self, result: ActionResult):
        line = f"{TAGS[result.outcome]} {result.message}"
        if result.outcome is Outcome.FAILED:
            self.error_output(line)
        else:
            self.output(line)

    def execute(self, action: Action) -> ActionResult:
        """Run one action and print exactly one tagged line for it"""
        self.logger.log_action_start(action.name)
        start_time = time.time()

        missing = self.settings.missing_for(action)
        asked = not missing and self.settings.requires_confirmation(action)
        if missing:
            result = ActionResult(Outcome.SKIPPED, f"{action.label}: {MissingToolError(missing)}")
        elif asked and not self.confirm(action):
            result = ActionResult(Outcome.SKIPPED, f"{action.label}: not confirmed")
        else:
            result = self._invoke(action, confirmed=asked)

        result.duration = time.time() - start_time
        self.logger.log_action_complete(action.name, result.outcome.value, result.duration)
        self.report(result)
        return result

    def _invoke(self, action: Action, confirmed: bool = False) -> ActionResult:
        ctx = ActionContext(self.settings, self.runner, self.output, confirmed)
        try:
            result = action.run(ctx)
        except NothingToDo as e:
            return ActionResult(Outcome.NOTHING_TO_DO, str(e))
        except ActionFailure as e:
            if e.command is not None:
                self.errors.append(self.error_handler.handle_command_error(
                    e.command, e.exit_code, action.name))
            return ActionResult(Outcome.FAILED, str(e))
        except FatalError:
            raise
        except MaintenanceError as e:
            return ActionResult(Outcome.FAILED, f"{action.label}: {e}")

        if result.outcome is Outcome.FAILED:
            failed = find_failed(result.commands)
            if failed is not None:
                self.errors.append(self.error_handler.handle_command_error(
                    failed.command, failed.exit_code, action.name, failed.stderr))
        return result

    def run_sequence(self, actions: Iterable[Action]) -> RunReporter:
        """Run each action once, continuing past failures"""
        reporter = RunReporter()
        reporter.set_start_time()
        for action in actions:
            reporter.add_result(action, self.execute(action))
        reporter.set_end_time()
        return reporter

    def perform_all(self) -> RunReporter:
        self.output("Performing all tasks in order...")
        self.errors = []
        reporter = self.run_sequence(self.registry.curated())
        self.output(reporter.generate_summary_report())
        self.error_handler.log_error_summary(self.errors)
        return reporter

    def run_all(self) -> int:
        """Non-interactive path: curated sequence, no prompts"""
        self.logger.log_run_start("non-interactive")
        start_time = time.time()
        try:
            self.perform_all()
        except FatalError as e:
            self.logger.error(f"Fatal error, aborting run: {e}")
            self.error_output(f"[FATAL] {e}")
            return 1
        self.logger.log_run_complete("non-interactive", time.time() - start_time)
        return 0

    def handle_effect(self, effect: Effect):
        if effect.kind is EffectKind.RUN:
            self.errors = []
            self.execute(effect.action)
            self.error_handler.log_error_summary(self.errors)
        elif effect.kind is EffectKind.RUN_ALL:
            self.perform_all()
        elif effect.kind is EffectKind.INVALID:
            self.error_output(f"[ERROR] {effect.message}")
        elif effect.kind is EffectKind.EXIT:
            self.output("Exiting...")

    def run_interactive(self) -> int:
        """Menu loop; returns the process exit status"""
        self.logger.log_run_start("interactive")
        state = State.MENU
        while state is not State.EXIT:
            self.output(self.render_menu())
            try:
                choice = self.input_func("Enter choice: ")
            except EOFError:
                choice = str(EXIT_ID)

            state, effect = transition(state, choice, self.registry)
            try:
                self.handle_effect(effect)
            except FatalError as e:
                self.logger.error(f"Fatal error, exiting: {e}")
                self.error_output(f"[FATAL] {e}")
                return 1

            if state is State.EXECUTING:
                state, _ = transition(state, None, self.registry)
        return 0
