from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from config import Settings
from utils.error_handler import ActionFailure
from utils.process import CommandResult, CommandRunner


class Outcome(Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"
    NOTHING_TO_DO = "nothing_to_do"


@dataclass
class ActionResult:
    outcome: Outcome
    message: str
    commands: List[CommandResult] = field(default_factory=list)
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return self.outcome in (Outcome.SUCCESS, Outcome.NOTHING_TO_DO)


@dataclass(frozen=True)
class ActionContext:
    """Everything an action may touch while it runs"""
    settings: Settings
    runner: CommandRunner
    output: Callable[[str], None] = print
    confirmed: bool = False

    @property
    def assume_yes(self) -> bool:
        """True when the tool's own prompt would only repeat a question already answered"""
        return self.confirmed or not self.settings.interactive

    def say(self, message: str):
        self.output(message)

    def run(self, command: str, **options: Any) -> CommandResult:
        return self.runner.run(command, options)


@dataclass(frozen=True)
class Action:
    id: int
    name: str
    label: str
    run: Callable[[ActionContext], ActionResult] = field(compare=False)
    required_tools: Tuple[str, ...] = ()
    destructive: bool = False
    privileged: bool = False


Step = Tuple[str, Dict[str, Any]]


def run_steps(ctx: ActionContext, steps: List[Step], success_message: str,
              failure_message: str) -> ActionResult:
    """
    Run independent steps in order

    A failing step does not stop later ones; the result fails if any did.
    """
    results = []
    for command, options in steps:
        results.append(ctx.run(command, **options))

    failed = [r for r in results if not r.success]
    if failed:
        codes = ", ".join(str(r.exit_code) for r in failed)
        return ActionResult(Outcome.FAILED, f"{failure_message} (exit code: {codes})", results)
    return ActionResult(Outcome.SUCCESS, success_message, results)


def require_success(result: CommandResult, message: str, accepted: Tuple[int, ...] = (0,)):
    """Raise ActionFailure unless the exit code is accepted"""
    if result.exit_code not in accepted:
        raise ActionFailure(f"{message} (exit code: {result.exit_code})",
                            result.exit_code, result.command)
    return result


def find_failed(results: List[CommandResult]) -> Optional[CommandResult]:
    for result in results:
        if not result.success:
            return result
    return None
