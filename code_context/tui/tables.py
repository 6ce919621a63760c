from collections import Counter

from rich.table import Column, Table
from rich.text import Text

from code_context.models import GenerationResult, LoadedRules, Mode, Rule
from code_context.tui.enums import CATEGORY_STYLE, GENERATION_STATUS_STYLE, UIStyle
from code_context.utils import compact_home_path


class RulesTable:
    @staticmethod
    def summary_block(rules: list[Rule], mode: Mode):
        counts = Counter(rule.category.value for rule in rules)
        chips = [f"{key}={value}" for key, value in sorted(counts.items()) if value > 0]
        if not chips:
            chips = ["none"]
        checked = sum(1 for rule in rules if rule.checked)

        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Mode", mode.value)
        table.add_row("Rules", str(len(rules)))
        table.add_row("Checked", str(checked))
        table.add_row("Categories", "  ".join(chips))
        return table

    @staticmethod
    def rules_table(rules: list[Rule]) -> Table:
        table = Table(
            Column(header="", width=3),
            Column(header="Pattern", overflow="fold"),
            Column(header="Category", width=10),
            expand=True,
            header_style="bold",
        )
        for rule in sorted(rules, key=lambda item: (item.category.value, item.pattern)):
            style = CATEGORY_STYLE.get(rule.category, UIStyle.WHITE.value)
            mark = "[green]x[/green]" if rule.checked else "[dim]-[/dim]"
            table.add_row(
                mark,
                Text(rule.pattern, style="" if rule.checked else UIStyle.DIM.value),
                f"[{style}]{rule.category.value}[/{style}]",
            )
        return table

    @staticmethod
    def loaded_block(loaded: LoadedRules):
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Local", str(len(loaded.local)))
        name = loaded.template.name or "none"
        table.add_row("Template", f"{name} ({len(loaded.template.rules)})")
        return table


class TemplatesTable:
    @staticmethod
    def names_table(names: list[str], suggested: list[str]) -> Table:
        table = Table(
            Column(header="Template"),
            Column(header="Suggested", width=10),
            expand=True,
            header_style="bold",
        )
        suggested_set = set(suggested)
        for name in names:
            mark = "[green]yes[/green]" if name in suggested_set else ""
            table.add_row(name, mark)
        return table


class GenerationTable:
    @staticmethod
    def result_block(result: GenerationResult):
        style = GENERATION_STATUS_STYLE.get(result.status, UIStyle.WHITE.value)
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Status", f"[{style}]{result.status.value}[/{style}]")
        table.add_row("Mode", result.mode.value)
        if result.output_path is not None:
            table.add_row("Output", compact_home_path(result.output_path))
        table.add_row("Directories", str(result.stats.directories))
        table.add_row("Files", str(result.stats.files))
        table.add_row("Binary", str(result.stats.binary_files))
        table.add_row("Unreadable", str(result.stats.read_errors))
        return table

    @staticmethod
    def patterns_table(patterns: list[str]) -> Table:
        table = Table(
            Column(header="#", width=4, justify="right"),
            Column(header="Effective pattern", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for index, pattern in enumerate(patterns, start=1):
            style = UIStyle.GREEN.value if pattern.startswith("!") else UIStyle.WHITE.value
            table.add_row(str(index), Text(pattern, style=style))
        return table
