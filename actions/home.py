import shutil
from pathlib import Path
from typing import List, Tuple

from actions.base import ActionContext, ActionResult, Outcome
from utils.error_handler import NothingToDo

STEAM_APPCACHE = Path(".steam/steam/appcache")


def purge_directory(ctx: ActionContext, directory: Path) -> bool:
    """
    Delete everything inside directory, keeping the directory itself.
    Returns False when the directory does not exist.
    """
    if not directory.is_dir():
        return False
    for entry in sorted(directory.iterdir()):
        if ctx.settings.dry_run:
            ctx.say(f"[DRY RUN] Would delete: {entry}")
        elif entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()
    return True


def clear_home_cache(ctx: ActionContext) -> ActionResult:
    cache_dir = ctx.settings.home / ".cache"
    ctx.say(f"Clearing user cache at {cache_dir}/...")
    try:
        found = purge_directory(ctx, cache_dir)
    except OSError as e:
        return ActionResult(Outcome.FAILED, f"Failed to clear ~/.cache: {e}")
    if not found:
        raise NothingToDo("No ~/.cache directory found.")
    return ActionResult(Outcome.SUCCESS, "~/.cache cleared.")


def steam_cache_dirs(home: Path) -> List[Tuple[str, Path]]:
    appcache = home / STEAM_APPCACHE
    return [
        ("Steam HTTP cache", appcache / "httpcache"),
        ("Steam Library cache", appcache / "librarycache"),
    ]


def clear_steam_cache(ctx: ActionContext) -> ActionResult:
    cleared = []
    errors = []
    for label, directory in steam_cache_dirs(ctx.settings.home):
        ctx.say(f"Clearing {label} at {directory}...")
        try:
            if purge_directory(ctx, directory):
                cleared.append(label)
            else:
                ctx.say(f"No {label} directory found.")
        except OSError as e:
            errors.append(f"{label}: {e}")

    if errors:
        return ActionResult(Outcome.FAILED, f"Failed to clear Steam cache ({'; '.join(errors)})")
    if not cleared:
        raise NothingToDo("No Steam cache directories found.")
    return ActionResult(Outcome.SUCCESS, f"{' and '.join(cleared)} cleared.")
