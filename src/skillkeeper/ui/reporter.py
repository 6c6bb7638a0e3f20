"""
Console reporter for command output.

Wraps two Rich consoles: normal output goes to stdout, errors and status
headers that must not pollute piped output go to stderr. User-provided
text (names, descriptions) is always printed as plain Text, never parsed
as Rich markup.
"""

import typing as _typing

import rich.console as _rich_console
import rich.rule as _rich_rule
import rich.text as _rich_text

import skillkeeper.skills as skills
import skillkeeper.ui.icons as icons

_STATUS_STYLES: dict[skills.CheckStatus, tuple[str, str, str]] = {
    skills.CheckStatus.PASSED: (icons.ICON_SUCCESS, "PASSED", "green"),
    skills.CheckStatus.WARNING: (icons.ICON_WARNING, "WARNING", "yellow"),
    skills.CheckStatus.FAILED: (icons.ICON_FAILURE, "FAILED", "red"),
}


class Reporter:
    """
    Formats skill listings, validation results and status messages.

    Args:
        no_color: Disable all colors.
        out: Stream for normal output (default: stdout at print time).
        err: Stream for error output (default: stderr at print time).
    """

    def __init__(
        self,
        *,
        no_color: bool = False,
        out: _typing.TextIO | None = None,
        err: _typing.TextIO | None = None,
    ) -> None:
        self._out = _rich_console.Console(
            file=out,
            no_color=no_color,
            highlight=False,
            soft_wrap=True,
        )
        self._err = _rich_console.Console(
            file=err,
            stderr=err is None,
            no_color=no_color,
            highlight=False,
            soft_wrap=True,
        )

    # Status messages
    def info(self, message: str) -> None:
        self._out.print(_rich_text.Text(message, style="blue"))

    def success(self, message: str) -> None:
        self._out.print(_rich_text.Text(f"{icons.icon_success()}{message}", style="green"))

    def warning(self, message: str) -> None:
        self._out.print(_rich_text.Text(f"{icons.icon_warning()}{message}", style="yellow"))

    def error(self, message: str) -> None:
        self._err.print(_rich_text.Text(f"Error: {message}", style="bold red"))

    def heading(self, title: str, *, stderr: bool = False) -> None:
        """Print a bold title followed by a rule."""
        console = self._err if stderr else self._out
        console.print(_rich_text.Text(title, style="bold blue"))
        console.print(_rich_rule.Rule(style="blue"))

    def line(self) -> None:
        self._out.print()

    def plain(self, text: str) -> None:
        self._out.print(_rich_text.Text(text))

    # Listings
    def category(self, name: str) -> None:
        self._out.print(_rich_text.Text(f"[{name}]", style="bold"))

    def skill_brief(self, summary: skills.SkillSummary) -> None:
        """Print a skill identifier with its description underneath."""
        entry = _rich_text.Text("  ")
        entry.append(icons.icon_bullet(), style="green")
        entry.append(summary.name)
        self._out.print(entry)
        if summary.description:
            self._out.print(_rich_text.Text(f"    {summary.description}"))
        else:
            self._out.print(_rich_text.Text("    (no description)", style="dim"))

    # Validation
    def check_started(self, name: str) -> None:
        """Print the start of a per-skill validation line (no newline)."""
        self._out.print(_rich_text.Text(f"Checking {name} ... "), end="")

    def check_finished(self, check: skills.SkillCheck) -> None:
        """Complete a validation line started by check_started()."""
        icon, label, style = _STATUS_STYLES[check.status]
        result = _rich_text.Text(f"{icon} {label}", style=style)
        if check.issues:
            result.append(" (" + "; ".join(i.message for i in check.issues) + ")")
        self._out.print(result)

    def check(self, check: skills.SkillCheck) -> None:
        """Print a complete validation line for one skill."""
        self.check_started(check.name)
        self.check_finished(check)

    def catalog_issue(self, issue: skills.Issue) -> None:
        if issue.severity is skills.Severity.ERROR:
            icon, style = icons.icon_failure(), "red"
        else:
            icon, style = icons.icon_warning(), "yellow"
        text = _rich_text.Text(icon, style=style)
        if issue.skill:
            text.append(f"{issue.skill}: ")
        text.append(issue.message)
        self._out.print(text)

    def validation_summary(self, report: skills.ValidationReport) -> None:
        summary = _rich_text.Text("Validation complete: ")
        summary.append(
            f"{report.error_count} error(s)",
            style="red" if report.error_count else "green",
        )
        summary.append(", ")
        summary.append(
            f"{report.warning_count} warning(s)",
            style="yellow" if report.warning_count else "green",
        )
        summary.append(
            f" ({report.passed_count} passed, {report.failed_count} failed"
            f" of {len(report.checks)} skill(s))"
        )
        self._out.print(summary)

    # Statistics
    def stats(self, stats: skills.CatalogStats) -> None:
        self.heading("Skills statistics")
        self.plain(f"Descriptor files: {stats.descriptor_files}")
        self.plain(f"Skill directories: {stats.skill_directories}")
        self.plain(f"Skills directory: {stats.root}")
        self._out.print(_rich_text.Text(f"Valid skills: {stats.valid}", style="green"))
        if stats.invalid:
            self._out.print(_rich_text.Text(f"Invalid skills: {stats.invalid}", style="red"))
        if stats.warnings:
            self._out.print(_rich_text.Text(f"Warnings: {stats.warnings}", style="yellow"))

        if stats.categories:
            self.line()
            self.plain("By category:")
            width = max(len(name) for name in stats.categories) + 1
            count_width = max(len(str(count)) for count in stats.categories.values())
            for name, count in stats.categories.items():
                label = icons.cell_ljust(name + ":", width)
                self.plain(f"  {label} {icons.cell_rjust(str(count), count_width)}")
