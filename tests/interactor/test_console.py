import io
import unittest
from unittest.mock import MagicMock

from warden.bootstrap import build_command_registry
from warden.core.errors import CommandNotFound, ValidationError
from warden.core.runner import Runner
from warden.core.scope import Scope
from warden.core.session_state import SessionState
from warden.interactor.command_registry import CommandRegistry
from warden.interactor.commands import ConsoleSignal
from warden.interactor.console import Interactor
from warden.plugin import Plugin
from warden.registry.plugin_registry import PluginRegistry


def _inputs(lines):
    it = iter(lines)

    def read(_prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError()

    return read


class TestCommandRegistry(unittest.TestCase):
    def test_dispatch_splits_line_into_tokens(self) -> None:
        reg = CommandRegistry()
        impl = MagicMock(return_value="ok")
        reg.register({"name": "change", "description": "d"}, impl)
        self.assertEqual(reg.dispatch('change "a b.txt" c'), ("change", "ok"))
        impl.assert_called_once_with(["a b.txt", "c"])

    def test_blank_line_is_ignored(self) -> None:
        reg = CommandRegistry()
        self.assertIsNone(reg.dispatch("   "))

    def test_unknown_command_raises(self) -> None:
        reg = CommandRegistry()
        with self.assertRaises(CommandNotFound) as cm:
            reg.dispatch("nope a b")
        self.assertEqual(cm.exception.code, "command.unknown")

    def test_unbalanced_quotes_raise_validation_error(self) -> None:
        reg = CommandRegistry()
        reg.register({"name": "change", "description": "d"}, MagicMock())
        with self.assertRaises(ValidationError) as cm:
            reg.dispatch('change "oops')
        self.assertEqual(cm.exception.code, "command.parse_error")

    def test_alias_shares_handler(self) -> None:
        reg = CommandRegistry()
        impl = MagicMock(return_value=1)
        reg.register({"name": "exit", "description": "d"}, impl)
        reg.alias("quit", "exit")
        self.assertEqual(reg.dispatch("quit"), ("quit", 1))
        self.assertEqual(reg.get("quit")["alias_of"], "exit")
        self.assertEqual(reg.names(), ["exit", "quit"])


class TestInteractor(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = PluginRegistry()
        self.frontend = self.registry.add_group("frontend")
        self.sass = self.registry.add_plugin(Plugin("sass", group=self.frontend))
        self.state = SessionState(self.registry)
        self.runner = MagicMock(spec=Runner)
        self.output = io.StringIO()
        self.commands = build_command_registry(
            registry=self.registry, state=self.state, runner=self.runner, output=self.output
        )

    def _console(self, lines):
        return Interactor(self.commands, self.state, input_func=_inputs(lines), output=self.output)

    def test_scope_then_change_session(self) -> None:
        rc = self._console(["scope frontend", "change app.css", "exit"]).run()
        self.assertEqual(rc, 0)
        self.assertEqual(self.state.scope, Scope.of(groups=[self.frontend]))
        self.runner.run_on_changes.assert_called_once_with(["app.css"], [], [], scope=Scope())

    def test_exit_stops_reading_input(self) -> None:
        read = MagicMock(side_effect=["quit", "scope frontend"])
        Interactor(self.commands, self.state, input_func=read, output=self.output).run()
        self.assertEqual(read.call_count, 1)
        self.assertTrue(self.state.scope.is_empty())

    def test_eof_ends_the_session(self) -> None:
        self.assertEqual(self._console([]).run(), 0)

    def test_unknown_command_is_reported_and_loop_continues(self) -> None:
        self._console(["frobnicate now", "scope sass"]).run()
        self.assertIn("Unknown command: frobnicate", self.output.getvalue())
        self.assertEqual(self.state.scope, Scope.of(plugins=[self.sass]))

    def test_runner_failure_is_reported_and_loop_continues(self) -> None:
        self.runner.run_on_changes.side_effect = RuntimeError("boom")
        self._console(["change a", "scope sass"]).run()
        self.assertIn("boom", self.output.getvalue())
        self.assertEqual(self.state.scope, Scope.of(plugins=[self.sass]))

    def test_keyboard_interrupt_at_prompt_continues(self) -> None:
        read = MagicMock(side_effect=[KeyboardInterrupt(), "scope frontend", EOFError()])
        Interactor(self.commands, self.state, input_func=read, output=self.output).run()
        self.assertEqual(self.state.scope, Scope.of(groups=[self.frontend]))

    def test_handle_line_returns_exit_signal(self) -> None:
        console = self._console([])
        self.assertIs(console.handle_line("exit"), ConsoleSignal.EXIT)
        self.assertIsNone(console.handle_line(""))
        self.assertIsNone(console.handle_line("show"))

    def test_prompt_shows_scope_and_pause(self) -> None:
        console = self._console([])
        self.assertTrue(console.prompt().endswith("warden(main)> "))
        self.state.set_scope(Scope.of(groups=[self.frontend]))
        self.state.pause()
        self.assertIn("frontend warden(pause)> ", console.prompt())

    def test_all_with_unknown_scope_does_not_run(self) -> None:
        self._console(["all nope"]).run()
        self.assertIn("Unknown scopes: nope", self.output.getvalue())
        self.runner.run_all.assert_not_called()

    def test_all_with_scope_runs_once(self) -> None:
        self._console(["all frontend"]).run()
        self.runner.run_all.assert_called_once_with(scope=Scope.of(groups=[self.frontend]))

    def test_show_lists_groups_and_scope(self) -> None:
        self.state.set_scope(Scope.of(plugins=[self.sass]))
        self._console(["show"]).run()
        out = self.output.getvalue()
        self.assertIn("default: (no plugins)", out)
        self.assertIn("frontend: sass", out)
        self.assertIn("Scope: sass", out)
        self.assertIn("Paused: no", out)

    def test_pause_toggles(self) -> None:
        self._console(["pause"]).run()
        self.assertTrue(self.state.paused)
        self._console(["pause"]).run()
        self.assertFalse(self.state.paused)
        self.assertIn("Paused\n", self.output.getvalue())
        self.assertIn("Unpaused\n", self.output.getvalue())

    def test_help_lists_commands_and_usage(self) -> None:
        self._console(["help", "help scope", "help nope"]).run()
        out = self.output.getvalue()
        for name in ("all", "change", "exit", "help", "pause", "quit", "scope", "show"):
            self.assertIn(name, out)
        self.assertIn("Usage: scope <scope>", out)
        self.assertIn("Unknown command: nope", out)


if __name__ == "__main__":
    unittest.main()
