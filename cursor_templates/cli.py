"""cursor-templates CLI — the main entry point for the template manager."""

from __future__ import annotations

import functools
import json
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cursor_templates import __version__
from cursor_templates.config import Settings, load_settings
from cursor_templates.errors import TemplateError
from cursor_templates.models.template import Rules, Template
from cursor_templates.utils.log import setup_logging

console = Console()


def handle_errors(func):
    """Report ``TemplateError`` as a red message and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except TemplateError as e:
            console.print(f"[red]Error:[/] {escape(e.message)}")
            if e.details:
                console.print(f"  [dim]{escape(e.details)}[/]")
            sys.exit(1)

    return wrapper


def _store(settings: Settings):
    from cursor_templates.store.template_store import TemplateStore

    return TemplateStore(settings.templates_dir)


def _print_template(template: Template, rating=None) -> None:
    header = f"  [bold]{escape(template.name or '')}[/] [dim](v{escape(template.version or '?')})[/]"
    if rating is not None and rating.votes:
        header += f" [yellow]★ {rating.rating:.1f}[/] [dim]({rating.votes} votes)[/]"
    console.print(header)
    console.print(f"    {escape(template.description or '')}")
    if template.tag_list:
        console.print(f"    [dim]Tags: {escape(', '.join(template.tag_list))}[/]")
    console.print()


class ClickPrompter:
    """Interactive prompts for ``init`` inputs the flags did not provide."""

    def choose_template(self, templates: list[Template]) -> Template:
        console.print("\n[cyan]Available templates:[/]")
        for i, template in enumerate(templates, start=1):
            console.print(f"  {i}. [bold]{escape(template.name or '')}[/] - {escape(template.description or '')}")
        choice = click.prompt(
            "Select a template",
            type=click.IntRange(1, len(templates)),
            default=1,
        )
        return templates[choice - 1]

    def ask_project_name(self, default: str) -> str:
        return click.prompt("Project name", default=default)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--home",
    envvar="CURSOR_TEMPLATES_HOME",
    default=None,
    help="Installation root holding templates/ and the registry files",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
@handle_errors
def main(ctx: click.Context, home: str | None, verbose: bool):
    """cursor-templates — manage Cursor IDE project templates.

    List, search, rate, validate and score templates, then apply them
    to new or existing projects.
    """
    setup_logging(verbose)
    ctx.obj = load_settings(home)


# ── Browse ───────────────────────────────────────────────────────────


@main.command(name="list")
@click.option("--json", "as_json", is_flag=True, help="Print templates as JSON")
@click.option("--category", "-c", default=None, help="Only templates in this category")
@click.option("--tag", "-t", default=None, help="Only templates with this tag")
@click.pass_obj
@handle_errors
def list_templates(settings: Settings, as_json: bool, category: str | None, tag: str | None):
    """List all available templates."""
    from cursor_templates.ratings.aggregator import RatingStore
    from cursor_templates.registry.discovery import filter_templates
    from cursor_templates.registry.repository import RegistryRepository

    templates = _store(settings).load_all()
    if category or tag:
        registry = RegistryRepository(settings.registry_file).load()
        templates = filter_templates(templates, registry.categories, category=category, tag=tag)

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in templates], indent=2))
        return

    if not templates:
        console.print("[yellow]No templates found.[/]")
        return

    ratings = RatingStore(settings.ratings_file).load()
    console.print("\n[cyan]Available Templates:[/]\n")
    for template in templates:
        _print_template(template, ratings.templates.get(template.name))


@main.command()
@click.argument("query")
@click.option("--category", "-c", default=None, help="Filter by category")
@click.pass_obj
@handle_errors
def search(settings: Settings, query: str, category: str | None):
    """Search templates by name, description or tag."""
    from cursor_templates.registry.discovery import search as search_templates
    from cursor_templates.registry.repository import RegistryRepository

    registry = RegistryRepository(settings.registry_file).load()
    results = search_templates(_store(settings).load_all(), query, registry.categories, category=category)

    if not results:
        console.print("[yellow]No templates found matching your search[/]")
        return

    console.print(f"\n[cyan]Found {len(results)} template(s):[/]\n")
    for template in results:
        _print_template(template)


@main.command()
@click.pass_obj
@handle_errors
def categories(settings: Settings):
    """Show how many templates fall into each category."""
    from cursor_templates.registry.discovery import category_counts
    from cursor_templates.registry.repository import RegistryRepository

    registry = RegistryRepository(settings.registry_file).load()
    counts = category_counts(_store(settings).load_all(), registry.categories)

    table = Table(title="Template Categories")
    table.add_column("Category", style="cyan")
    table.add_column("Templates", justify="right")
    table.add_column("Keywords", style="dim")
    for name, count in counts.items():
        keywords = ", ".join(registry.categories.get(name, []))
        table.add_row(name, str(count), keywords)
    console.print(table)


@main.command()
@click.pass_obj
@handle_errors
def featured(settings: Settings):
    """Show featured templates."""
    from cursor_templates.ratings.aggregator import RatingStore
    from cursor_templates.registry.discovery import featured as featured_templates
    from cursor_templates.registry.repository import RegistryRepository

    registry = RegistryRepository(settings.registry_file).load()
    ratings = RatingStore(settings.ratings_file).load()
    templates = featured_templates(_store(settings).load_all(), registry, ratings)

    console.print("\n[cyan]Featured Templates:[/]\n")
    if not templates:
        console.print("[dim]  No featured templates yet[/]")
        return
    for template in templates:
        _print_template(template, ratings.templates.get(template.name))


@main.command()
@click.pass_obj
@handle_errors
def trending(settings: Settings):
    """Show trending templates."""
    from cursor_templates.ratings.aggregator import RatingStore
    from cursor_templates.registry.discovery import trending as trending_templates
    from cursor_templates.registry.repository import RegistryRepository

    registry = RegistryRepository(settings.registry_file).load()
    ratings = RatingStore(settings.ratings_file).load()
    templates = trending_templates(_store(settings).load_all(), registry, ratings)

    console.print("\n[cyan]Trending Templates:[/]\n")
    if not templates:
        console.print("[dim]  No trending templates yet[/]")
        return
    for template in templates:
        _print_template(template, ratings.templates.get(template.name))


@main.command()
@click.option("--tag", "-t", "tags", multiple=True, help="Tags of your current project")
@click.pass_obj
@handle_errors
def recommend(settings: Settings, tags: tuple):
    """Get template recommendations."""
    from cursor_templates.ratings.aggregator import RatingStore
    from cursor_templates.registry.discovery import recommend as recommend_templates
    from cursor_templates.registry.repository import RegistryRepository

    registry = RegistryRepository(settings.registry_file).load()
    ratings = RatingStore(settings.ratings_file).load()
    templates = recommend_templates(
        _store(settings).load_all(), registry, ratings, current_tags=list(tags)
    )

    console.print("\n[cyan]Recommended Templates:[/]\n")
    if not templates:
        console.print("[dim]  No recommendations available[/]")
        return
    for template in templates:
        _print_template(template, ratings.templates.get(template.name))


# ── Validate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("template")
@click.pass_obj
@handle_errors
def validate(settings: Settings, template: str):
    """Validate a template.

    TEMPLATE can be a template name or a path to a template.json file.
    """
    from pathlib import Path

    from cursor_templates.errors import TemplateParseError
    from cursor_templates.validation.validator import validate_template

    store = _store(settings)
    path = Path(template)
    if not path.is_file():
        path = store.templates_dir / template / store.DESCRIPTOR_FILE

    console.print(f"\n[bold blue]cursor-templates[/] — Validating: {escape(template)}\n")

    try:
        loaded = store.load_file(path)
    except TemplateParseError as e:
        console.print(f"  [red]x[/] Failed to parse template: {escape(e.reason)}")
        sys.exit(1)

    result = validate_template(loaded)
    for error in result.errors:
        console.print(f"  [red]x[/] {escape(error)}")
    for warning in result.warnings:
        console.print(f"  [yellow]![/] {escape(warning)}")

    if not result.passed:
        console.print(f"\n[red]Invalid[/] {result.summary()}")
        sys.exit(1)

    console.print(f"\n[green]Template is valid![/] {result.summary()}")


@main.command(name="validate-all")
@click.option("--report/--no-report", default=True, help="Write the JSON test report")
@click.pass_obj
@handle_errors
def validate_all(settings: Settings, report: bool):
    """Validate every template in the store."""
    from cursor_templates.validation.report import summarize_validation, write_validation_report
    from cursor_templates.validation.validator import validate_entry

    console.print("[cyan]Testing all templates...[/]\n")

    results = []
    for entry in _store(settings).load_entries():
        result = validate_entry(entry)
        results.append(result)

        console.print(f"[bold]Testing: {escape(entry.directory)}[/]")
        if not result.passed:
            console.print(f"  [red]x Invalid ({len(result.errors)} errors)[/]")
            for error in result.errors:
                console.print(f"     [red]• {escape(error)}[/]")
        elif result.has_warnings:
            console.print(f"  [yellow]! Valid with warnings ({len(result.warnings)})[/]")
        else:
            console.print("  [green]v Valid[/]")
        for warning in result.warnings:
            console.print(f"     [yellow]• {escape(warning)}[/]")
        console.print()

    if report:
        summary = write_validation_report(settings.validation_report, results)
    else:
        summary = summarize_validation(results)

    console.print("[cyan]Test Summary:[/]")
    console.print(f"  Total templates: {summary.total}")
    console.print(f"  [green]Valid: {summary.valid}[/]")
    console.print(f"  [yellow]Valid with warnings: {summary.warnings}[/]")
    console.print(f"  [red]Invalid: {summary.invalid}[/]")
    if report:
        console.print(f"\n[dim]Detailed report saved to: {escape(str(settings.validation_report))}[/]")

    if not summary.passed:
        sys.exit(1)


# ── Quality ──────────────────────────────────────────────────────────


def _grade_style(grade: str) -> str:
    return {"A": "green", "B": "blue", "C": "yellow", "D": "magenta"}.get(grade[:1], "red")


@main.command()
@click.option("--template", "-t", "template_name", default=None, help="Score a single template")
@click.option("--report", is_flag=True, help="Write quality-metrics.json")
@click.pass_obj
@handle_errors
def quality(settings: Settings, template_name: str | None, report: bool):
    """Score template quality (0-100) and show the grade breakdown."""
    from cursor_templates.quality.metrics import score_entry, summarize, write_quality_report
    from cursor_templates.quality.scorer import score_template

    store = _store(settings)

    if template_name:
        result = score_template(store.get(template_name))
        reports = [result]

        style = _grade_style(result.grade)
        console.print(f"\n[bold]{escape(result.name)}[/]: {result.score}/100 ([{style}]{result.grade}[/])\n")
        table = Table(title="Breakdown")
        table.add_column("Dimension", style="cyan")
        table.add_column("Score", justify="right")
        for dim in result.breakdown.values():
            table.add_row(dim.name, f"{dim.score}/{dim.max_score}")
        console.print(table)
        for issue in result.issues:
            console.print(f"  [red]x[/] {escape(issue)}")
        for rec in result.recommendations:
            console.print(f"  [yellow]>[/] {escape(rec)}")
    else:
        console.print("[cyan]Analyzing template quality...[/]\n")
        reports = []
        for entry in store.load_entries():
            result = score_entry(entry)
            reports.append(result)
            style = _grade_style(result.grade)
            console.print(f"[dim]Analyzing: {escape(entry.directory)}[/]")
            console.print(f"  Score: {result.score}/100 ([{style}]{result.grade}[/])")
            if result.error:
                console.print(f"  [red]Error: {escape(result.error)}[/]")
            if result.issues:
                console.print(f"  [red]Issues: {len(result.issues)}[/]")
            if result.recommendations:
                console.print(f"  [yellow]Recommendations: {len(result.recommendations)}[/]")
            console.print()

        summary = summarize(reports)
        console.print("[cyan]Quality Summary:[/]")
        console.print(f"  Templates analyzed: {summary.analyzed}/{summary.total}")
        console.print(f"  Average score: {summary.average_score}/100")

        if summary.grade_distribution:
            console.print("\n[cyan]Grade Distribution:[/]")
            for grade, count in sorted(summary.grade_distribution.items()):
                console.print(f"  [{_grade_style(grade)}]{grade}[/]: {count}")
        if summary.top_issues:
            console.print("\n[cyan]Top Issues:[/]")
            for i, (issue, count) in enumerate(summary.top_issues, start=1):
                console.print(f"  {i}. {escape(issue)} ({count} templates)")
        if summary.top_recommendations:
            console.print("\n[cyan]Top Recommendations:[/]")
            for i, (rec, count) in enumerate(summary.top_recommendations, start=1):
                console.print(f"  {i}. {escape(rec)} ({count} templates)")

    if report:
        write_quality_report(settings.quality_report, reports)
        console.print(f"\n[dim]Detailed metrics saved to: {escape(str(settings.quality_report))}[/]")


# ── Ratings ──────────────────────────────────────────────────────────


@main.command()
@click.argument("template")
@click.argument("rating", type=int)
@click.option("--comment", "-m", default=None, help="Optional review text")
@click.pass_obj
@handle_errors
def rate(settings: Settings, template: str, rating: int, comment: str | None):
    """Rate a template from 1 to 5."""
    from cursor_templates.ratings.aggregator import RatingStore, add_rating

    store = RatingStore(settings.ratings_file)
    document = add_rating(
        store.load(),
        template,
        rating,
        known_templates=_store(settings).names(),
        comment=comment,
    )
    store.save(document)

    record = document.templates[template]
    console.print(
        f"[green]Rated {escape(template)} {rating}/5.[/] "
        f"Average: {record.rating:.1f} ({record.votes} votes)"
    )


# ── Import ───────────────────────────────────────────────────────────


@main.command(name="import")
@click.argument("url")
@click.pass_obj
@handle_errors
def import_template(settings: Settings, url: str):
    """Import a template from GitHub (owner/repo or URL)."""
    from cursor_templates.registry.discovery import import_external
    from cursor_templates.registry.repository import RegistryRepository

    template = import_external(url, _store(settings), RegistryRepository(settings.registry_file))
    console.print(f'[green]Template "{escape(template.name)}" imported successfully![/]')


# ── Projects ─────────────────────────────────────────────────────────


@main.command()
@click.option("--template", "-t", "template_name", default=None, help="Template name")
@click.option("--name", "-n", "project_name", default=None, help="Project name")
@click.option("--path", "-p", default=None, help="Project path (default: ./<name>)")
@click.option("--yes", "-y", is_flag=True, help="Write into a non-empty directory without asking")
@click.pass_obj
@handle_errors
def init(settings: Settings, template_name: str | None, project_name: str | None, path: str | None, yes: bool):
    """Initialize a project from a template."""
    from cursor_templates.sync.init_request import resolve_init_request
    from cursor_templates.sync.materializer import materialize

    request = resolve_init_request(
        _store(settings).load_all(),
        template_name=template_name,
        project_name=project_name,
        path=path,
        prompter=ClickPrompter(),
    )
    template = request.template

    if request.target.is_dir() and any(request.target.iterdir()) and not yes:
        if not click.confirm(f'Directory "{request.target}" already exists. Continue anyway?', default=False):
            console.print("[yellow]Operation cancelled[/]")
            return

    console.print(f"\n[cyan]Creating {escape(template.name)} project: {escape(request.project_name)}[/]\n")
    result = materialize(template, request.target, project_name=request.project_name)
    console.print(f"[green]Template initialized successfully![/] ({len(result.written)} files)")

    if template.commands:
        console.print("\n[cyan]Available commands:[/]")
        for key, value in template.commands.items():
            console.print(f"  [bold]{escape(key)}[/]: {escape(str(value))}")

    console.print("\n[yellow]Next steps:[/]")
    console.print(f"  1. cd {escape(str(request.target))}")
    step = 2
    if template.commands and template.commands.get("install"):
        console.print(f"  {step}. Run: {escape(template.commands['install'])}")
        step += 1
    console.print(f"  {step}. Open in Cursor IDE")


@main.command()
@click.option("--path", "-p", default=".", help="Project directory")
@click.option("--check", is_flag=True, help="Only report whether an update is available")
@click.option("--force", is_flag=True, help="Rewrite files even when versions match")
@click.pass_obj
@handle_errors
def update(settings: Settings, path: str, check: bool, force: bool):
    """Update a project to the latest version of its template."""
    from cursor_templates.sync.marker import read_marker
    from cursor_templates.sync.update_checker import apply_update, check_for_update

    marker = read_marker(path)
    template = _store(settings).get(marker.template)

    if check:
        result = check_for_update(marker, template)
        style = "yellow" if result.has_update else "green"
        console.print(f"[{style}]{escape(result.summary)}[/]")
        return

    result = apply_update(template, path, marker, force=force)
    if not result.applied:
        console.print(f"[green]{escape(result.check.summary)}[/]")
        return

    for backup in result.backups:
        console.print(f"  [dim]Backed up to {escape(str(backup))}[/]")
    console.print(
        f"[green]Updated {escape(template.name)} to {escape(template.version)}[/] "
        f"({len(result.written)} files written)"
    )


# ── Create ───────────────────────────────────────────────────────────


@main.command()
@click.option("--name", prompt="Template name", help="Template name (kebab-case)")
@click.option("--description", prompt="Template description", help="Short description")
@click.option("--author", prompt="Author name", default="", help="Author name")
@click.option("--tags", prompt="Tags (comma-separated)", default="", help="Comma-separated tags")
@click.pass_obj
@handle_errors
def create(settings: Settings, name: str, description: str, author: str, tags: str):
    """Create a new template skeleton in the store."""
    name = name.strip()
    if not name or not description.strip():
        raise TemplateError("Template name and description are required")

    store = _store(settings)
    if store.templates_dir.is_dir() and store.exists(name):
        raise TemplateError(f'Template "{name}" already exists')

    template = Template(
        name=name,
        description=description.strip(),
        version="1.0.0",
        author=author.strip(),
        tags=[t.strip() for t in tags.split(",") if t.strip()],
        rules=Rules(
            context="",
            style={"language": "", "framework": "", "conventions": []},
            restrictions=[],
            preferences=[],
        ),
        files=[],
        commands={},
    )
    path = store.save(template)

    console.print(f"[green]Template created at: {escape(str(path.parent))}[/]")
    console.print("[yellow]Edit template.json to customize your template[/]")


if __name__ == "__main__":
    main()
