from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from code_context.models import GenerationResult, GenerationStatus, LoadedRules, Mode, Rule
from code_context.tui.enums import UIStyle
from code_context.tui.tables import GenerationTable, RulesTable, TemplatesTable
from code_context.utils import compact_home_path


def _section(title: str, body, style: str) -> Panel:
    return Panel(body, title=title, border_style=style, padding=(0, 1))


def _note(title: str, body: str, style: str) -> Panel:
    return Panel(body, title=f"[bold]{title}[/bold]", border_style=style, padding=(0, 1))


class ContextConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_rules(self, rules: list[Rule], mode: Mode) -> None:
        self.console.print(
            _section(
                "rules overview",
                RulesTable.summary_block(rules, mode),
                style=UIStyle.BLUE.value,
            )
        )
        if not rules:
            self.console.print(
                _note(
                    "rules",
                    "No rules configured.\n"
                    "- code-context rules load\n"
                    "- code-context rules add <pattern>",
                    style=UIStyle.DIM.value,
                )
            )
            return
        self.console.print(
            _section(
                f"{mode.value} rules",
                RulesTable.rules_table(rules),
                style=UIStyle.CYAN.value,
            )
        )

    def render_loaded(self, loaded: LoadedRules) -> None:
        self.console.print(
            _section(
                "rules loaded", RulesTable.loaded_block(loaded), style=UIStyle.GREEN.value
            )
        )

    def render_rule_saved(self, rule: Rule, removed: bool = False) -> None:
        verb = "Removed" if removed else "Saved"
        style = UIStyle.YELLOW.value if removed else UIStyle.GREEN.value
        state = "checked" if rule.checked else "unchecked"
        self.console.print(
            _note(
                "rule",
                f"{verb} rule: [bold]{escape(rule.pattern)}[/bold] ({rule.category.value}, {state})",
                style=style,
            )
        )

    def render_templates(self, names: list[str], suggested: list[str]) -> None:
        if not names:
            self.console.print(
                _note(
                    "templates",
                    "Could not fetch .gitignore templates.",
                    style=UIStyle.YELLOW.value,
                )
            )
            return
        self.console.print(
            _section(
                "templates",
                TemplatesTable.names_table(names, suggested),
                style=UIStyle.BLUE.value,
            )
        )

    def render_detected(self, detected: list[str]) -> None:
        body = ", ".join(detected) if detected else "No known project type detected."
        self.console.print(_note("project type", body, style=UIStyle.CYAN.value))

    def render_mode(self, mode: Mode, changed: bool = False) -> None:
        verb = "switched to" if changed else "is"
        self.console.print(
            _note(
                "mode", f"Active mode {verb} [bold]{mode.value}[/bold]", style=UIStyle.BLUE.value
            )
        )

    def render_generation(self, result: GenerationResult, verbose: bool = False) -> None:
        self.console.print(
            _section(
                "generation",
                GenerationTable.result_block(result),
                style=UIStyle.GREEN.value if result.written else UIStyle.YELLOW.value,
            )
        )
        if verbose:
            self.console.print(
                _section(
                    "effective patterns",
                    GenerationTable.patterns_table(result.patterns),
                    style=UIStyle.DIM.value,
                )
            )
        if result.truncated_rules:
            truncated = "\n".join(f"- {escape(rule)}" for rule in result.truncated_rules)
            self.console.print(
                _note(
                    "search truncated",
                    f"Only the first matches were included for:\n{truncated}",
                    style=UIStyle.YELLOW.value,
                )
            )
        if result.written and result.output_path is not None:
            self.console.print(
                _note(
                    "next",
                    f"Context written to {compact_home_path(result.output_path)}",
                    style=UIStyle.DIM.value,
                )
            )

    def render_warning(self, status: GenerationStatus) -> None:
        if status == GenerationStatus.EMPTY_WHITELIST:
            message = (
                "Include mode has no checked rules; nothing was generated.\n"
                "- code-context rules add <path>"
            )
        else:
            message = (
                "No exclusion rules are checked; every file would be included.\n"
                "- code-context generate --yes"
            )
        self.console.print(_note("warning", message, style=UIStyle.YELLOW.value))

