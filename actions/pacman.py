import shlex
from typing import List

from actions.base import (ActionContext, ActionResult, Outcome, require_success,
                          run_steps)
from utils.error_handler import NoOrphans


def use_yay(ctx: ActionContext) -> bool:
    """yay refuses to run as root, so root always goes through pacman"""
    return ctx.settings.has_tool("yay") and not ctx.settings.privileged


def get_system_update_commands(ctx: ActionContext):
    """
    Prefer yay when present so AUR packages are upgraded too.
    yay calls sudo itself and must NOT be run with sudo.
    """
    if use_yay(ctx):
        return [("yay -Syu --noconfirm", {"needs_sudo": True, "handles_sudo_internally": True})]
    return [("pacman -Syu --noconfirm", {"needs_sudo": True})]


def update_system(ctx: ActionContext) -> ActionResult:
    if use_yay(ctx):
        ctx.say("Updating system & AUR packages with yay...")
    else:
        ctx.say("Updating system packages with pacman...")
    return run_steps(ctx, get_system_update_commands(ctx),
                     "System (and AUR) packages updated.",
                     "Failed to update system packages")


def parse_orphans(stdout: str) -> List[str]:
    return [line.strip() for line in (stdout or "").splitlines() if line.strip()]


def remove_orphans(ctx: ActionContext) -> ActionResult:
    ctx.say("Identifying orphaned dependencies...")
    # pacman -Qdtq exits 1 when nothing matches
    query = ctx.run("pacman -Qdtq", capture=True)
    require_success(query, "Failed to query orphaned packages", accepted=(0, 1))

    orphans = parse_orphans(query.stdout)
    if not orphans:
        raise NoOrphans("No orphaned packages to remove.")

    ctx.say(f"Orphaned packages found: {' '.join(orphans)}")
    ctx.say("Removing orphaned packages...")
    removal = ctx.run(f"pacman -Rns --noconfirm {shlex.join(orphans)}", needs_sudo=True)
    commands = [query, removal]
    if not removal.success:
        return ActionResult(Outcome.FAILED,
                            f"Failed to remove orphaned packages (exit code: {removal.exit_code})",
                            commands)
    return ActionResult(Outcome.SUCCESS, "Orphaned packages removed.", commands)


def clear_pacman_cache(ctx: ActionContext) -> ActionResult:
    ctx.say("Clearing package cache...")
    return run_steps(ctx, [("pacman -Scc --noconfirm", {"needs_sudo": True})],
                     "Package cache cleared.", "Failed to clear pacman cache")


def clear_paccache(ctx: ActionContext) -> ActionResult:
    ctx.say("Clearing package cache with paccache...")
    return run_steps(ctx, [("paccache -ruk0", {"needs_sudo": True})],
                     "Package cache cleared.", "Failed to clear package cache")
