from typing import Dict, FrozenSet, Iterable, Sequence, Tuple

from actions import firmware, flatpak, home, journal, mirrors, pacman
from actions.base import Action
from utils.error_handler import ActionNotFound

EXIT_ID = 0

# Mirrors first so upgrades fetch from fresh mirrors; caches only once
# everything that downloads packages is done.
CURATED_ORDER = (
    "update_mirrors",
    "update_system",
    "update_flatpak",
    "remove_unused_flatpak",
    "repair_flatpak",
    "update_firmware",
    "remove_orphans",
    "clear_pacman_cache",
    "clear_paccache",
    "clear_journal",
    "clear_home_cache",
    "clear_steam_cache",
)


class ActionRegistry:
    """Ordered, read-only collection of maintenance actions"""

    def __init__(self, actions: Iterable[Action], curated_order: Sequence[str]):
        self._actions: Tuple[Action, ...] = tuple(actions)
        self._by_id: Dict[int, Action] = {}
        by_name: Dict[str, Action] = {}

        for action in self._actions:
            if action.id == EXIT_ID:
                raise ValueError(f"Action id {EXIT_ID} is reserved for exit")
            if action.id in self._by_id:
                raise ValueError(f"Duplicate action id: {action.id}")
            if action.name in by_name:
                raise ValueError(f"Duplicate action name: {action.name}")
            self._by_id[action.id] = action
            by_name[action.name] = action

        if sorted(curated_order) != sorted(by_name):
            raise ValueError("Curated order must name every action exactly once")
        self._curated = tuple(by_name[name] for name in curated_order)

    def lookup(self, action_id) -> Action:
        """Return the action for a menu id, raising ActionNotFound otherwise"""
        try:
            key = int(str(action_id).strip())
        except ValueError:
            raise ActionNotFound(f"Invalid choice: {action_id}")
        if key not in self._by_id:
            raise ActionNotFound(f"Invalid choice: {action_id}")
        return self._by_id[key]

    def all(self) -> Tuple[Action, ...]:
        return self._actions

    def curated(self) -> Tuple[Action, ...]:
        return self._curated

    def names(self) -> FrozenSet[str]:
        return frozenset(action.name for action in self._actions)

    def tools(self) -> FrozenSet[str]:
        tools = set()
        for action in self._actions:
            tools.update(action.required_tools)
        return frozenset(tools)

    def __len__(self):
        return len(self._actions)

    def __iter__(self):
        return iter(self._actions)


def build_registry() -> ActionRegistry:
    """Build the registry from the static action list; ids are stable"""
    actions = [
        Action(1, "update_mirrors", "Update Arch mirrors (reflector)",
               mirrors.update_mirrors, ("reflector",), privileged=True),
        Action(2, "update_system", "Update the system (and AUR) packages, preferring yay",
               pacman.update_system, ("pacman",), privileged=True),
        Action(3, "update_flatpak", "Update Flatpak apps",
               flatpak.update_flatpak, ("flatpak",)),
        Action(4, "remove_unused_flatpak", "Remove unused Flatpak runtimes and extensions",
               flatpak.remove_unused_flatpak, ("flatpak",)),
        Action(5, "repair_flatpak", "Repair Flatpak",
               flatpak.repair_flatpak, ("flatpak",)),
        Action(6, "update_firmware", "Update firmware via fwupd",
               firmware.update_firmware, ("fwupdmgr",), destructive=True, privileged=True),
        Action(7, "remove_orphans", "Remove orphaned packages",
               pacman.remove_orphans, ("pacman",), destructive=True, privileged=True),
        Action(8, "clear_pacman_cache", "Clear package cache (pacman -Scc)",
               pacman.clear_pacman_cache, ("pacman",), privileged=True),
        Action(9, "clear_paccache", "Clear package cache (paccache -ruk0)",
               pacman.clear_paccache, ("paccache",), privileged=True),
        Action(10, "clear_journal", "Clear journal",
               journal.clear_journal, ("journalctl",), privileged=True),
        Action(11, "clear_home_cache", "Clear user ~/.cache",
               home.clear_home_cache),
        Action(12, "clear_steam_cache", "Clear Steam appcache",
               home.clear_steam_cache),
    ]
    return ActionRegistry(actions, CURATED_ORDER)
