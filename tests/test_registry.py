import pytest

from actions.base import Action, ActionResult, Outcome
from actions.registry import ActionRegistry, CURATED_ORDER, build_registry
from utils.error_handler import ActionNotFound, InvalidSelection


def _noop(ctx):
    return ActionResult(Outcome.SUCCESS, "ok")


class TestActionRegistry:
    """Test the static action registry"""

    def test_menu_ids_are_stable(self, registry):
        """Menu numbers map to the same actions in every build"""
        expected = {
            1: "update_mirrors",
            2: "update_system",
            3: "update_flatpak",
            4: "remove_unused_flatpak",
            5: "repair_flatpak",
            6: "update_firmware",
            7: "remove_orphans",
            8: "clear_pacman_cache",
            9: "clear_paccache",
            10: "clear_journal",
            11: "clear_home_cache",
            12: "clear_steam_cache",
        }
        assert {a.id: a.name for a in registry.all()} == expected
        assert {a.id: a.name for a in build_registry().all()} == expected

    def test_lookup_returns_same_action(self, registry):
        """Repeated lookups return the identical object"""
        for action in registry.all():
            assert registry.lookup(action.id) is registry.lookup(action.id)
            assert registry.lookup(str(action.id)) is action

    def test_lookup_strips_whitespace(self, registry):
        assert registry.lookup(" 7 \n").name == "remove_orphans"

    @pytest.mark.parametrize("bad", ["0", "13", "99", "", "abc", "-1", "7a"])
    def test_lookup_unknown_id(self, registry, bad):
        with pytest.raises(ActionNotFound):
            registry.lookup(bad)

    def test_not_found_is_invalid_selection(self):
        assert issubclass(ActionNotFound, InvalidSelection)
        assert issubclass(ActionNotFound, LookupError)

    def test_curated_order(self, registry):
        """Mirrors come first, upgrades before cache clearing"""
        names = [a.name for a in registry.curated()]
        assert names == list(CURATED_ORDER)
        assert names.index("update_mirrors") < names.index("update_system")
        assert names.index("update_system") < names.index("clear_pacman_cache")
        assert names.index("update_system") < names.index("clear_paccache")

    def test_curated_contains_every_action_once(self, registry):
        assert sorted(a.id for a in registry.curated()) == sorted(a.id for a in registry.all())

    def test_curated_differs_from_menu_order(self, registry):
        assert [a.id for a in registry.curated()] != [a.id for a in registry.all()]

    def test_destructive_defaults(self, registry):
        destructive = {a.name for a in registry.all() if a.destructive}
        assert destructive == {"remove_orphans", "update_firmware"}

    def test_tools(self, registry):
        assert registry.tools() == {"reflector", "pacman", "flatpak", "fwupdmgr",
                                    "paccache", "journalctl"}

    def test_registry_is_read_only(self, registry):
        action = registry.lookup(1)
        with pytest.raises(AttributeError):
            action.label = "changed"
        assert isinstance(registry.all(), tuple)

    def test_reject_exit_id(self):
        with pytest.raises(ValueError, match="reserved"):
            ActionRegistry([Action(0, "a", "A", _noop)], ["a"])

    def test_reject_duplicate_id(self):
        actions = [Action(1, "a", "A", _noop), Action(1, "b", "B", _noop)]
        with pytest.raises(ValueError, match="Duplicate action id"):
            ActionRegistry(actions, ["a", "b"])

    def test_reject_duplicate_name(self):
        actions = [Action(1, "a", "A", _noop), Action(2, "a", "B", _noop)]
        with pytest.raises(ValueError, match="Duplicate action name"):
            ActionRegistry(actions, ["a", "a"])

    def test_reject_incomplete_curated_order(self):
        actions = [Action(1, "a", "A", _noop), Action(2, "b", "B", _noop)]
        with pytest.raises(ValueError, match="Curated order"):
            ActionRegistry(actions, ["a"])
