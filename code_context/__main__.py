import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

import click
from rich.console import Console

from code_context.errors import ContextAppError, ProjectRootError
from code_context.generator import ContextGenerator
from code_context.log import configure_logging
from code_context.messages import SessionController
from code_context.models import GenerationRequest, GenerationStatus, Mode
from code_context.rules.repository import SessionRepository
from code_context.session import SessionService
from code_context.settings import SettingsRepository
from code_context.templates import GitHubTemplateRepository, detect_project_types
from code_context.tui import ContextConsoleUI


MODE_VALUES = [mode.value for mode in Mode]


def _mode_option(help_text: str = "Rule collection to act on (default: active mode).") -> Callable:
    return click.option(
        "--mode",
        "mode",
        type=click.Choice(MODE_VALUES, case_sensitive=False),
        default=None,
        help=help_text,
    )


def _normalize_mode(value: Optional[str]) -> Optional[Mode]:
    return Mode(value.lower()) if value else None


@dataclass
class CliContext:
    project_root: Path
    sessions: SessionRepository
    session: SessionService
    generator: ContextGenerator
    templates: GitHubTemplateRepository

    def save(self) -> None:
        self.sessions.save(self.project_root, self.session.state)


def _context_from_obj(obj: dict[str, Any]) -> CliContext:
    project_root: Path = obj["project"]
    if not project_root.is_dir():
        raise click.ClickException(str(ProjectRootError(project_root)))
    try:
        settings = SettingsRepository().load(project_root)
    except ContextAppError as exc:
        raise click.ClickException(str(exc))

    sessions = SessionRepository()
    templates = GitHubTemplateRepository()
    state = sessions.load(project_root)
    return CliContext(
        project_root=project_root,
        sessions=sessions,
        session=SessionService(project_root, state, settings=settings, templates=templates),
        generator=ContextGenerator(project_root, settings=settings),
        templates=templates,
    )


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--project",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project root to scan.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging and effective patterns.")
@click.pass_context
def cli(ctx: click.Context, project: Path, verbose: bool) -> None:
    """Assemble a project's folder structure and file contents into one text file."""
    configure_logging(verbose)
    ctx.obj = {"project": project.expanduser().resolve(), "verbose": verbose}


@cli.command(help="Generate the project context file.")
@_mode_option("Rule collection and strategy to use (default: active mode).")
@click.option(
    "--rule",
    "rules",
    multiple=True,
    help="Use these patterns instead of the session's checked rules.",
)
@click.option("-y", "--yes", is_flag=True, help="Proceed without rules in exclude mode.")
@click.pass_obj
def generate(obj: dict[str, Any], mode: Optional[str], rules: tuple[str, ...], yes: bool) -> None:
    ui = ContextConsoleUI(Console())
    context = _context_from_obj(obj)
    request = context.session.generation_request(_normalize_mode(mode), confirmed=yes)
    if rules:
        request = GenerationRequest(selected_rules=list(rules), mode=request.mode, confirmed=yes)

    try:
        result = context.generator.generate(request)
        if result.status == GenerationStatus.NEEDS_CONFIRMATION:
            ui.render_warning(result.status)
            if not click.confirm("Include every file?", default=False):
                raise click.exceptions.Exit(1)
            request = GenerationRequest(
                selected_rules=request.selected_rules, mode=request.mode, confirmed=True
            )
            result = context.generator.generate(request)
    except ContextAppError as exc:
        raise click.ClickException(f"Failed to generate context: {exc}")

    if result.status == GenerationStatus.EMPTY_WHITELIST:
        ui.render_warning(result.status)
        raise click.exceptions.Exit(1)

    ui.render_generation(result, verbose=obj.get("verbose", False))


@cli.group(help="Manage exclude/include rules.")
def rules() -> None:
    pass


@rules.command("load", help="Load rules from .gitignore, settings and a template.")
@click.option("--template", default=None, help="github/gitignore template name, e.g. Python.")
@click.pass_obj
def rules_load(obj: dict[str, Any], template: Optional[str]) -> None:
    ui = ContextConsoleUI(Console())
    context = _context_from_obj(obj)
    loaded = context.session.load_rules(template)
    context.save()
    ui.render_loaded(loaded)
    ui.render_rules(context.session.state.exclude.rules, Mode.EXCLUDE)


@rules.command("list", help="List rules of a collection.")
@_mode_option()
@click.pass_obj
def rules_list(obj: dict[str, Any], mode: Optional[str]) -> None:
    ui = ContextConsoleUI(Console())
    context = _context_from_obj(obj)
    selected = _normalize_mode(mode) or context.session.state.mode
    ui.render_rules(context.session.state.collection(selected).rules, selected)


@rules.command("add", help="Add a custom rule.")
@click.argument("pattern")
@_mode_option()
@click.pass_obj
def rules_add(obj: dict[str, Any], pattern: str, mode: Optional[str]) -> None:
    ui = ContextConsoleUI(Console())
    context = _context_from_obj(obj)
    try:
        rule = context.session.add_rule(pattern, _normalize_mode(mode))
    except ContextAppError as exc:
        raise click.ClickException(str(exc))
    context.save()
    ui.render_rule_saved(rule)


@rules.command("remove", help="Remove a rule.")
@click.argument("pattern")
@_mode_option()
@click.pass_obj
def rules_remove(obj: dict[str, Any], pattern: str, mode: Optional[str]) -> None:
    ui = ContextConsoleUI(Console())
    context = _context_from_obj(obj)
    selected = _normalize_mode(mode)
    existing = context.session.state.collection(selected).get(pattern)
    if existing is None:
        raise click.ClickException(f"Rule not found: {pattern}")
    context.session.remove_rule(pattern, selected)
    context.save()
    ui.render_rule_saved(existing, removed=True)


@rules.command("toggle", help="Flip or set the checked state of a rule.")
@click.argument("pattern")
@click.option("--on/--off", "checked", default=None, help="Set instead of flipping.")
@_mode_option()
@click.pass_obj
def rules_toggle(
    obj: dict[str, Any], pattern: str, checked: Optional[bool], mode: Optional[str]
) -> None:
    ui = ContextConsoleUI(Console())
    context = _context_from_obj(obj)
    try:
        rule = context.session.toggle_rule(pattern, checked, _normalize_mode(mode))
    except ContextAppError as exc:
        raise click.ClickException(str(exc))
    context.save()
    ui.render_rule_saved(rule)


@rules.command("select-all", help="Check (or with --none, uncheck) every rule.")
@click.option("--none", "uncheck", is_flag=True, help="Uncheck every rule instead.")
@_mode_option()
@click.pass_obj
def rules_select_all(obj: dict[str, Any], uncheck: bool, mode: Optional[str]) -> None:
    ui = ContextConsoleUI(Console())
    context = _context_from_obj(obj)
    selected = _normalize_mode(mode) or context.session.state.mode
    context.session.select_all(not uncheck, selected)
    context.save()
    ui.render_rules(context.session.state.collection(selected).rules, selected)


@rules.command("import", help="Import rules from an ignore-syntax file.")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_mode_option()
@click.pass_obj
def rules_import(obj: dict[str, Any], path: Path, mode: Optional[str]) -> None:
    ui = ContextConsoleUI(Console())
    context = _context_from_obj(obj)
    selected = _normalize_mode(mode) or context.session.state.mode
    try:
        context.session.import_rules(path, selected)
    except OSError as exc:
        raise click.ClickException(f"Failed to read {path}: {exc}")
    context.save()
    ui.render_rules(context.session.state.collection(selected).rules, selected)


@rules.command("reset", help="Forget the saved session for this project.")
@click.pass_obj
def rules_reset(obj: dict[str, Any]) -> None:
    context = _context_from_obj(obj)
    removed = context.sessions.clear(context.project_root)
    click.echo("Session cleared." if removed else "No saved session.")


@cli.command(help="Show or switch the active mode.")
@click.argument(
    "value", required=False, type=click.Choice(MODE_VALUES, case_sensitive=False)
)
@click.pass_obj
def mode(obj: dict[str, Any], value: Optional[str]) -> None:
    ui = ContextConsoleUI(Console())
    context = _context_from_obj(obj)
    selected = _normalize_mode(value)
    if selected is None:
        ui.render_mode(context.session.state.mode)
        return
    context.session.set_mode(selected)
    context.save()
    ui.render_mode(selected, changed=True)


@cli.group(help="Browse github/gitignore templates.")
def templates() -> None:
    pass


@templates.command("list", help="List available templates.")
@click.pass_obj
def templates_list(obj: dict[str, Any]) -> None:
    ui = ContextConsoleUI(Console())
    context = _context_from_obj(obj)
    ui.render_templates(
        context.templates.list_templates(), detect_project_types(context.project_root)
    )


@templates.command("detect", help="Suggest templates from project marker files.")
@click.pass_obj
def templates_detect(obj: dict[str, Any]) -> None:
    ui = ContextConsoleUI(Console())
    context = _context_from_obj(obj)
    ui.render_detected(detect_project_types(context.project_root))


@cli.command(help="Handle one JSON request from stdin and print the JSON response.")
@click.pass_obj
def request(obj: dict[str, Any]) -> None:
    context = _context_from_obj(obj)
    raw = sys.stdin.read()
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        click.echo(json.dumps({"type": "error", "message": f"Invalid JSON ({exc})"}))
        raise click.exceptions.Exit(1)

    controller = SessionController(context.session, context.generator, context.templates)
    response = controller.handle(payload)
    context.save()
    click.echo(json.dumps(response))
    if response.get("type") == "error":
        raise click.exceptions.Exit(1)


def main() -> int:
    try:
        code = cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.exceptions.Abort:
        return 1
    except click.ClickException as exc:
        exc.show()
        return 2
    # non-standalone click returns the code of an explicit Exit
    return code if isinstance(code, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
