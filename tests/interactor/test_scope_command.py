import io
import unittest
from unittest.mock import MagicMock

from warden.core.scope import Scope
from warden.core.session_state import SessionState
from warden.interactor.commands import ScopeCommand, ScopeOutcome
from warden.plugin import Plugin
from warden.registry.plugin_registry import PluginRegistry


class TestScopeCommand(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = PluginRegistry()
        self.foo_group = self.registry.add_group("foo")
        self.bar_plugin = self.registry.add_plugin(Plugin("bar", group=self.foo_group))
        self.state = SessionState(self.registry)
        self.output = io.StringIO()
        self.command = ScopeCommand(registry=self.registry, state=self.state, output=self.output)

    def test_without_scope_shows_usage_and_keeps_state(self) -> None:
        before = self.state.scope
        outcome = self.command.process([])
        self.assertIs(outcome, ScopeOutcome.USAGE_SHOWN)
        self.assertEqual(self.output.getvalue(), "Usage: scope <scope>\n")
        self.assertIs(self.state.scope, before)

    def test_with_a_valid_group_scope(self) -> None:
        outcome = self.command.process(["foo"])
        self.assertIs(outcome, ScopeOutcome.SCOPE_REPLACED)
        self.assertEqual(self.state.scope, Scope.of(groups=[self.foo_group]))
        self.assertEqual(self.output.getvalue(), "")

    def test_with_a_valid_plugin_scope(self) -> None:
        outcome = self.command.process(["bar"])
        self.assertIs(outcome, ScopeOutcome.SCOPE_REPLACED)
        self.assertEqual(self.state.scope, Scope.of(plugins=[self.bar_plugin]))

    def test_with_an_invalid_scope(self) -> None:
        outcome = self.command.process(["baz"])
        self.assertIs(outcome, ScopeOutcome.UNKNOWN_REPORTED)
        self.assertEqual(self.output.getvalue(), "Unknown scopes: baz\n")
        self.assertEqual(self.state.scope, Scope())

    def test_lists_every_unknown_token_in_input_order(self) -> None:
        self.command.process(["zed", "foo", "abc"])
        self.assertEqual(self.output.getvalue(), "Unknown scopes: zed, abc\n")

    def test_partially_known_scope_does_not_mutate_state(self) -> None:
        self.command.process(["bar"])
        current = self.state.scope
        self.command.process(["foo", "nope"])
        self.assertIs(self.state.scope, current)

    def test_replaces_previous_scope_instead_of_merging(self) -> None:
        self.command.process(["bar"])
        self.command.process(["foo"])
        self.assertEqual(self.state.scope, Scope.of(groups=[self.foo_group]))

    def test_no_state_calls_on_usage_or_unknown(self) -> None:
        state = MagicMock(spec=SessionState)
        command = ScopeCommand(registry=self.registry, state=state, output=self.output)
        command.process([])
        command.process(["baz"])
        state.set_scope.assert_not_called()

    def test_sets_scope_once_with_resolved_record(self) -> None:
        state = MagicMock(spec=SessionState)
        command = ScopeCommand(registry=self.registry, state=state, output=self.output)
        command.process(["foo", "bar"])
        state.set_scope.assert_called_once_with(Scope.of(plugins=[self.bar_plugin], groups=[self.foo_group]))

    def test_callable_form_matches_process(self) -> None:
        self.assertIs(self.command(("bar",)), ScopeOutcome.SCOPE_REPLACED)
        self.assertEqual(self.state.scope.plugins, frozenset([self.bar_plugin]))


if __name__ == "__main__":
    unittest.main()
