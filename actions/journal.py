import shlex

from actions.base import ActionContext, ActionResult, run_steps


def clear_journal(ctx: ActionContext) -> ActionResult:
    vacuum_time = ctx.settings.journal_vacuum_time
    ctx.say(f"Clearing journal entries older than {vacuum_time}...")
    return run_steps(ctx, [(f"journalctl --vacuum-time={shlex.quote(vacuum_time)}", {"needs_sudo": True})],
                     "Journal cleared.", "Failed to clear journal")
