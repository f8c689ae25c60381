from actions.base import ActionContext, ActionResult, run_steps


def update_flatpak(ctx: ActionContext) -> ActionResult:
    ctx.say("Updating Flatpak apps...")
    return run_steps(ctx, [("flatpak update -y", {})],
                     "Flatpak apps updated successfully.",
                     "Failed to update Flatpak apps")


def remove_unused_flatpak(ctx: ActionContext) -> ActionResult:
    ctx.say("Removing unused Flatpak runtimes and extensions...")
    command = "flatpak uninstall --unused"
    if ctx.assume_yes:
        command += " -y"
    return run_steps(ctx, [(command, {})],
                     "Unused Flatpak runtimes and extensions removed successfully.",
                     "Failed to remove unused Flatpak runtimes and extensions")


def repair_flatpak(ctx: ActionContext) -> ActionResult:
    ctx.say("Repairing local Flatpak installation...")
    return run_steps(ctx, [("flatpak repair", {})],
                     "Local Flatpak installation successfully repaired.",
                     "Failed to repair local Flatpak installation")
