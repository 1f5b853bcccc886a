import unittest

from warden.core.scope import Scope
from warden.interactor.scope_converter import convert_scope
from warden.plugin import Plugin
from warden.registry.plugin_registry import PluginRegistry


class TestConvertScope(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = PluginRegistry()
        self.frontend = self.registry.add_group("frontend")
        self.backend = self.registry.add_group("backend")
        self.rspec = self.registry.add_plugin(Plugin("rspec", group=self.backend))
        self.sass = self.registry.add_plugin(Plugin("sass", group=self.frontend))

    def test_empty_input_yields_empty_scope_and_no_unknown(self) -> None:
        out = convert_scope([], self.registry)
        self.assertEqual(out.scope, Scope())
        self.assertTrue(out.scope.is_empty())
        self.assertEqual(out.unknown, [])
        self.assertTrue(out.complete)

    def test_group_token(self) -> None:
        out = convert_scope(["frontend"], self.registry)
        self.assertEqual(out.scope.groups, frozenset([self.frontend]))
        self.assertEqual(out.scope.plugins, frozenset())
        self.assertEqual(out.unknown, [])

    def test_plugin_token(self) -> None:
        out = convert_scope(["rspec"], self.registry)
        self.assertEqual(out.scope.plugins, frozenset([self.rspec]))
        self.assertEqual(out.scope.groups, frozenset())
        self.assertEqual(out.unknown, [])

    def test_unknown_tokens_keep_order_and_duplicates(self) -> None:
        out = convert_scope(["zeta", "rspec", "alpha", "zeta"], self.registry)
        self.assertEqual(out.unknown, ["zeta", "alpha", "zeta"])
        self.assertFalse(out.complete)
        self.assertEqual(out.scope.plugins, frozenset([self.rspec]))

    def test_all_unknown_is_distinct_from_empty_input(self) -> None:
        out = convert_scope(["baz"], self.registry)
        self.assertTrue(out.scope.is_empty())
        self.assertEqual(out.unknown, ["baz"])
        self.assertFalse(out.complete)

    def test_duplicate_tokens_collapse_to_one_reference(self) -> None:
        out = convert_scope(["rspec", "rspec", "frontend", "frontend"], self.registry)
        self.assertEqual(len(out.scope.plugins), 1)
        self.assertEqual(len(out.scope.groups), 1)
        self.assertEqual(out.unknown, [])

    def test_names_are_case_sensitive(self) -> None:
        out = convert_scope(["RSpec", "Frontend"], self.registry)
        self.assertTrue(out.scope.is_empty())
        self.assertEqual(out.unknown, ["RSpec", "Frontend"])

    def test_plugin_wins_over_group_with_same_name(self) -> None:
        shared = self.registry.add_group("docs")
        docs_plugin = self.registry.add_plugin(Plugin("docs", group=self.frontend))
        out = convert_scope(["docs"], self.registry)
        self.assertEqual(out.scope.plugins, frozenset([docs_plugin]))
        self.assertNotIn(shared, out.scope.groups)
        self.assertEqual(out.scope.groups, frozenset())

    def test_every_token_lands_in_exactly_one_side(self) -> None:
        tokens = ["frontend", "nope", "sass", "backend", "rspec", "nope", "other"]
        out = convert_scope(tokens, self.registry)
        resolved_names = {p.name for p in out.scope.plugins} | {g.name for g in out.scope.groups}
        unknown_names = set(out.unknown)
        self.assertEqual(resolved_names | unknown_names, set(tokens))
        self.assertEqual(resolved_names & unknown_names, set())

    def test_conversion_is_repeatable_and_pure(self) -> None:
        groups_before = self.registry.groups()
        plugins_before = self.registry.plugins()
        first = convert_scope(["frontend", "rspec", "x"], self.registry)
        second = convert_scope(["frontend", "rspec", "x"], self.registry)
        self.assertEqual(first, second)
        self.assertEqual(self.registry.groups(), groups_before)
        self.assertEqual(self.registry.plugins(), plugins_before)

    def test_accepts_any_iterable(self) -> None:
        out = convert_scope(iter(["sass", "q"]), self.registry)
        self.assertEqual(out.scope.plugins, frozenset([self.sass]))
        self.assertEqual(out.unknown, ["q"])


if __name__ == "__main__":
    unittest.main()
