import shlex
from typing import List

from actions.base import ActionContext, ActionResult, run_steps
from config import ReflectorSettings


def build_reflector_command(reflector: ReflectorSettings) -> str:
    args: List[str] = ["reflector"]
    if reflector.country:
        args += ["--country", reflector.country]
    args += [
        "--protocol", reflector.protocol,
        "--age", str(reflector.age),
        "--verbose",
        "--latest", str(reflector.latest),
        "--sort", reflector.sort,
        "--save", reflector.save,
    ]
    return shlex.join(args)


def update_mirrors(ctx: ActionContext) -> ActionResult:
    ctx.say("Updating mirrors using reflector...")
    command = build_reflector_command(ctx.settings.reflector)
    return run_steps(ctx, [(command, {"needs_sudo": True})],
                     "Arch mirrors updated successfully.",
                     "Failed to update Arch mirrors")
