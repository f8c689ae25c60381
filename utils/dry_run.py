from typing import Iterable

from utils.process import CommandRunner, CommandResult


class DryRunRunner(CommandRunner):
    """Runner that prints the final command instead of executing it"""

    def __init__(self, *args, output=print, **kwargs):
        super().__init__(*args, **kwargs)
        self.output = output
        self.planned = []

    def _execute(self, command: str, capture: bool) -> CommandResult:
        self.planned.append(command)
        self.output(f"[DRY RUN] Would run: {command}")
        return CommandResult(command, 0, "" if capture else None, "" if capture else None)


def generate_plan_report(actions: Iterable, settings) -> str:
    """Describe which actions a run would attempt and which would be skipped"""
    report_lines = []
    report_lines.append("=" * 60)
    report_lines.append("           DRY RUN PLAN")
    report_lines.append("=" * 60)

    ready = 0
    total = 0
    for action in actions:
        total += 1
        missing = settings.missing_for(action)
        if missing:
            report_lines.append(f"  ⚠  {action.id:>2}) {action.label} - would skip, missing {', '.join(missing)}")
        else:
            ready += 1
            marker = "(confirm)" if action.name in settings.destructive else ""
            report_lines.append(f"  ✓ {action.id:>2}) {action.label} {marker}".rstrip())

    report_lines.append("-" * 60)
    report_lines.append(f"Summary: {ready}/{total} actions ready")
    if not settings.privileged:
        report_lines.append(f"Privileged steps will be run through '{settings.sudo_command}'")
    report_lines.append("=" * 60)

    return "\n".join(report_lines)
