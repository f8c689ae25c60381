from actions.base import (ActionContext, ActionResult, Outcome, require_success)
from utils.error_handler import NoUpdatesAvailable

# fwupdmgr exits 2 when there is nothing to do
FWUPD_NOTHING_TO_DO = 2


def update_firmware(ctx: ActionContext) -> ActionResult:
    """Refresh metadata, then apply pending updates if there are any"""
    ctx.say("Refreshing fwupd metadata...")
    refresh = ctx.run("fwupdmgr refresh", needs_sudo=True)
    require_success(refresh, "Failed to refresh fwupd metadata",
                    accepted=(0, FWUPD_NOTHING_TO_DO))

    ctx.say("Checking for fwupd updates...")
    query = ctx.run("fwupdmgr get-updates", capture=True)
    if query.exit_code == FWUPD_NOTHING_TO_DO:
        raise NoUpdatesAvailable("No firmware updates available.")
    require_success(query, "Failed to check for firmware updates")
    if not (query.stdout or "").strip():
        raise NoUpdatesAvailable("No firmware updates available.")

    ctx.say("Applying firmware updates...")
    command = "fwupdmgr update"
    if ctx.assume_yes:
        command += " -y"
    apply = ctx.run(command, needs_sudo=True)
    commands = [refresh, query, apply]
    if not apply.success:
        return ActionResult(Outcome.FAILED,
                            f"Failed to apply firmware updates (exit code: {apply.exit_code})",
                            commands)
    return ActionResult(Outcome.SUCCESS, "Firmware updates applied.", commands)
