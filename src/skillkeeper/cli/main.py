"""
Main CLI entry point for Skillkeeper.

Provides the command-line interface using Click.
"""

import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.logging as _rich_logging
import yaml as _yaml

import skillkeeper
import skillkeeper.config as config
import skillkeeper.config.sources as config_sources
import skillkeeper.skills as skills
import skillkeeper.ui as ui

_logger = _logging.getLogger(__name__)

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _configure_logging(level: str, *, no_color: bool) -> None:
    """Send diagnostics to stderr through Rich, at the configured level."""
    handler = _rich_logging.RichHandler(
        console=_rich_console.Console(stderr=True, no_color=no_color),
        show_path=False,
        show_time=False,
    )
    root = _logging.getLogger("skillkeeper")
    root.handlers[:] = [handler]
    root.setLevel(getattr(_logging, level.upper()))
    root.propagate = False


def _load_settings() -> config.Settings:
    """Load settings, turning configuration errors into a clean exit."""
    try:
        return config.Settings()
    except config.ConfigFileError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None
    except _pydantic.ValidationError as e:
        _click.echo(f"Error: invalid configuration: {e}", err=True)
        raise SystemExit(1) from None


def _get_catalog(ctx: _click.Context) -> skills.SkillCatalog:
    """Build the catalog for the resolved skills directory, or exit."""
    settings: config.Settings = ctx.obj["settings"]
    reporter: ui.Reporter = ctx.obj["reporter"]
    catalog = skills.SkillCatalog.from_settings(settings, ctx.obj["skills_dir"])
    if not catalog.root.is_dir():
        reporter.error(f"Skills directory not found: {catalog.root}")
        raise SystemExit(1)
    return catalog


def _require(value: str | None, message: str) -> str:
    """Treat a missing or blank argument as a usage error."""
    if value is None or not value.strip():
        raise _click.UsageError(message)
    return value


def _echo_json(data: _typing.Any) -> None:
    _click.echo(_json.dumps(data, indent=2))


@_click.group(invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@_click.version_option(skillkeeper.__version__, "-v", "--version", prog_name="skillkeeper")
@_click.option(
    "--skills-dir",
    type=_click.Path(file_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Directory holding one sub-directory per skill",
)
@_click.option("--no-color", is_flag=True, help="Disable colored output")
@_click.option("--verbose", is_flag=True, help="Enable debug logging on stderr")
@_click.pass_context
def cli(
    ctx: _click.Context,
    skills_dir: _pathlib.Path | None,
    no_color: bool,
    verbose: bool,
) -> None:
    """
    Skillkeeper - manage agent skills.

    A skill is a directory holding a SKILL.md file with YAML frontmatter
    (name, description) followed by Markdown instructions.

    \b
    Examples:
        skillkeeper list
        skillkeeper show bdd-scenario-writer
        skillkeeper search testing
        skillkeeper stats
        skillkeeper validate
        skillkeeper install bdd-scenario-writer
    """
    settings = _load_settings()
    no_color = no_color or not settings.output.color

    _configure_logging("debug" if verbose else settings.logging.level, no_color=no_color)
    for key in settings.get_unknown_keys():
        _logger.warning("Unknown configuration key: %s", key)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["skills_dir"] = skills_dir.resolve() if skills_dir else None
    ctx.obj["reporter"] = ui.Reporter(no_color=no_color)

    # No subcommand - show help and fail, like any other usage error
    if ctx.invoked_subcommand is None:
        _click.echo(ctx.get_help())
        ctx.exit(1)


# =============================================================================
# Skill Commands
# =============================================================================


@cli.command(name="list")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def list_cmd(ctx: _click.Context, json_output: bool) -> None:
    """List skills grouped by category."""
    reporter: ui.Reporter = ctx.obj["reporter"]
    catalog = _get_catalog(ctx)

    try:
        groups = catalog.categorize()
    except skills.ManifestError as e:
        reporter.error(str(e))
        raise SystemExit(1) from None

    total = sum(len(g.skills) for g in groups)

    if json_output:
        _echo_json({
            "root": str(catalog.root),
            "categories": [g.to_dict() for g in groups],
            "count": total,
        })
        return

    reporter.heading("Skills")
    for index, group in enumerate(groups):
        if index:
            reporter.line()
        reporter.category(group.name)
        for summary in group.skills:
            reporter.skill_brief(summary)

    reporter.line()
    reporter.info(f"Total skills found: {total}")


@cli.command(name="show")
@_click.argument("name", required=False)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def show_cmd(ctx: _click.Context, name: str | None, json_output: bool) -> None:
    """Print a skill's SKILL.md exactly as stored."""
    name = _require(name, "Please provide a skill name")
    reporter: ui.Reporter = ctx.obj["reporter"]
    catalog = _get_catalog(ctx)

    try:
        directory = catalog.get(name)
        content = directory.read_descriptor_bytes()
    except skills.SkillNotFoundError as e:
        if json_output:
            _echo_json({"error": str(e)})
        else:
            reporter.error(str(e))
        raise SystemExit(1) from None

    if json_output:
        data: dict[str, _typing.Any] = {
            "name": directory.name,
            "path": str(directory.descriptor_path),
            "content": content.decode("utf-8", errors="replace"),
        }
        try:
            data["frontmatter"] = catalog.load(name).to_dict()
        except skills.FrontmatterError as e:
            data["frontmatter_error"] = str(e)
        _echo_json(data)
        return

    # Header goes to stderr so stdout carries the descriptor byte for byte
    reporter.heading(f"Skill: {directory.name}", stderr=True)
    _click.echo(content, nl=False)


@cli.command(name="search")
@_click.argument("keyword", required=False)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def search_cmd(ctx: _click.Context, keyword: str | None, json_output: bool) -> None:
    """Find skills whose SKILL.md contains KEYWORD (case-insensitive)."""
    keyword = _require(keyword, "Please provide a search keyword")
    reporter: ui.Reporter = ctx.obj["reporter"]
    catalog = _get_catalog(ctx)

    matches = catalog.search(keyword)

    if json_output:
        _echo_json({
            "keyword": keyword,
            "matches": [m.to_dict() for m in matches],
            "count": len(matches),
        })
        return

    reporter.info(f"Searching for skills matching '{keyword}':")
    reporter.line()
    if not matches:
        reporter.warning(f"No skills found matching '{keyword}'")
        return

    for summary in matches:
        reporter.skill_brief(summary)
        reporter.line()
    reporter.info(f"Found {len(matches)} matching skill(s)")


@cli.command(name="stats")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def stats_cmd(ctx: _click.Context, json_output: bool) -> None:
    """Show statistics computed from the skills on disk."""
    reporter: ui.Reporter = ctx.obj["reporter"]
    catalog = _get_catalog(ctx)

    try:
        stats = catalog.stats()
    except skills.ManifestError as e:
        reporter.error(str(e))
        raise SystemExit(1) from None

    if json_output:
        _echo_json(stats.to_dict())
    else:
        reporter.stats(stats)


@cli.command(name="validate")
@_click.argument("name", required=False)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def validate_cmd(ctx: _click.Context, name: str | None, json_output: bool) -> None:
    """Validate SKILL.md files (all skills, or only NAME).

    Exits with status 1 when any error is found. Warnings are reported
    but do not change the exit status.
    """
    reporter: ui.Reporter = ctx.obj["reporter"]
    catalog = _get_catalog(ctx)

    on_check = None if json_output else reporter.check
    if not json_output:
        reporter.info(f"Validating skills in {catalog.root}")
        reporter.line()

    try:
        report = catalog.validate(name, on_check=on_check)
    except skills.SkillNotFoundError as e:
        reporter.error(str(e))
        raise SystemExit(1) from None

    if json_output:
        _echo_json(report.to_dict())
    else:
        if report.catalog_issues:
            reporter.line()
            reporter.plain("Catalog:")
            for issue in report.catalog_issues:
                reporter.catalog_issue(issue)
        reporter.line()
        reporter.validation_summary(report)

    ctx.exit(report.exit_code)


# =============================================================================
# Install Commands
# =============================================================================


def _get_installer(
    ctx: _click.Context,
    target: str | None,
    dest: _pathlib.Path | None,
) -> skills.SkillInstaller:
    """Resolve the install directory from options and configuration."""
    settings: config.Settings = ctx.obj["settings"]
    install = settings.install
    if target is not None:
        install = install.model_copy(update={"target": target, "dir": None})
    install_dir = dest.expanduser() if dest is not None else install.resolve_dir()
    return skills.SkillInstaller(install_dir)


_target_option = _click.option(
    "--target",
    type=_click.Choice(["opencode", "claude"]),
    default=None,
    help="Agent runtime to install for (default: from config)",
)
_dest_option = _click.option(
    "--dest",
    type=_click.Path(file_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Install into this directory instead",
)


@cli.command(name="install")
@_click.argument("name", required=False)
@_target_option
@_dest_option
@_click.pass_context
def install_cmd(
    ctx: _click.Context,
    name: str | None,
    target: str | None,
    dest: _pathlib.Path | None,
) -> None:
    """Copy a skill to the agent runtime's skill directory.

    An existing installation with the same name is replaced.
    """
    name = _require(name, "Please provide a skill name")
    reporter: ui.Reporter = ctx.obj["reporter"]
    catalog = _get_catalog(ctx)
    installer = _get_installer(ctx, target, dest)

    try:
        directory = catalog.get(name, require_descriptor=False)
        reporter.info(f"Installing skill '{name}' to {installer.install_dir}...")
        result = installer.install(directory)
    except (skills.SkillNotFoundError, skills.InstallError) as e:
        reporter.error(str(e))
        raise SystemExit(1) from None

    if result.replaced:
        reporter.warning(f"Replaced existing installation at {result.destination}")
    reporter.success(f"Skill installed to {result.destination}")


@cli.command(name="install-all")
@_target_option
@_dest_option
@_click.pass_context
def install_all_cmd(
    ctx: _click.Context,
    target: str | None,
    dest: _pathlib.Path | None,
) -> None:
    """Install every skill that has a SKILL.md."""
    reporter: ui.Reporter = ctx.obj["reporter"]
    catalog = _get_catalog(ctx)
    installer = _get_installer(ctx, target, dest)

    reporter.info(f"Installing all skills to {installer.install_dir}...")
    try:
        results = installer.install_all(catalog.directories())
    except skills.InstallError as e:
        reporter.error(str(e))
        raise SystemExit(1) from None

    replaced = sum(1 for r in results if r.replaced)
    message = f"Installed {len(results)} skill(s) to {installer.install_dir}"
    if replaced:
        message += f" ({replaced} replaced)"
    reporter.success(message)


@cli.command(name="test")
@_click.argument("name", required=False)
@_click.pass_context
def test_cmd(ctx: _click.Context, name: str | None) -> None:
    """Test a skill (not implemented yet)."""
    name = _require(name, "Please provide a skill name")
    reporter: ui.Reporter = ctx.obj["reporter"]
    catalog = _get_catalog(ctx)

    try:
        catalog.get(name)
    except skills.SkillNotFoundError as e:
        reporter.error(str(e))
        raise SystemExit(1) from None

    reporter.info(f"Testing skill: {name}")
    reporter.warning("Skill testing is not implemented; no checks were run")


# =============================================================================
# Config Commands
# =============================================================================


@cli.group(name="config", invoke_without_command=True)
@_click.pass_context
def config_cmd(ctx: _click.Context) -> None:
    """Configuration commands.

    Without a subcommand, shows a configuration overview.
    """
    if ctx.invoked_subcommand is None:
        settings: config.Settings = ctx.obj["settings"]
        skills_dir = ctx.obj["skills_dir"] or settings.resolve_skills_dir()
        _click.echo("Skillkeeper Configuration:")
        _click.echo(f"  Skills Dir: {skills_dir}")
        _click.echo(f"  Descriptor: {settings.validation.descriptor_name}")
        _click.echo(f"  Description Prefix: {settings.validation.description_prefix}")
        _click.echo(f"  Install Dir: {settings.install_dir}")
        _click.echo(f"  Config Dir: {settings.config_dir}")
        _click.echo("\nRun 'skillkeeper config show' for full configuration details.")


@config_cmd.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def config_show(ctx: _click.Context, as_json: bool) -> None:
    """Show effective configuration from all sources."""
    settings: config.Settings = ctx.obj["settings"]
    full_config = settings.model_dump(mode="json")

    if as_json:
        _echo_json(full_config)
    else:
        dumped = _yaml.safe_dump(full_config, default_flow_style=False, sort_keys=False)
        _click.echo(dumped, nl=False)


@config_cmd.command(name="path")
@_click.option("--all", "show_all", is_flag=True, help="Show all paths even if not found")
def config_path(show_all: bool) -> None:
    """
    Show configuration file paths and their status.

    ✓ marks a layer that was loaded, ✗ a missing file. A file that exists but
    holds no settings is listed as empty.
    """
    cwd = _pathlib.Path.cwd()
    paths = [
        ("Built-in defaults", config_sources.get_builtin_defaults_path()),
        ("User config", config_sources.get_user_config_path()),
        ("Project config", config_sources.get_project_config_path(cwd)),
    ]
    source = config_sources.LayeredYamlSettingsSource(config.Settings, cwd)
    loaded = {path for _, path in source.get_loaded_layers()}

    for name, path in paths:
        exists = path.exists()
        if not (exists or show_all):
            continue
        if path in loaded:
            _click.echo(f"✓ {name}: {path}")
        elif exists:
            _click.echo(f"- {name}: {path} (empty)")
        else:
            _click.echo(f"✗ {name}: {path}")


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="skillkeeper")


if __name__ == "__main__":
    main()
