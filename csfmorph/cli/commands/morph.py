"""
Transformation commands for the csfmorph CLI.

This module contains command handlers for:
- Rewriting single-default-export story modules to CSF3 in place
- Splitting multi-default-export modules into one file per title
- Migrating modules by routing each to one of the above
"""

import json
import sys
from pathlib import Path

from csfmorph.api import CsfMorph, MorphAction, MorphReport, Severity
from csfmorph.cli.rich_output import get_rich_output


def format_morph_report(report: MorphReport, format_type: str) -> str:
    """Format a report for plain output."""
    if format_type == "json":
        return json.dumps(report.to_dict(), indent=2)

    output = []
    for result in report.results:
        status = "ok" if result.success else "failed"
        action = result.action.value if result.action else "-"
        output.append(f"{result.module_path} [{action}] {status}")
        for path in result.files_written:
            output.append(f"  wrote {path}")
        for diagnostic in result.diagnostics:
            output.append(f"  {diagnostic.severity.value}: {diagnostic.message}")

    written = len(report.files_written)
    prefix = "[dry-run] " if report.dry_run else ""
    output.append(
        f"{prefix}{len(report.results)} modules processed, {written} files written, "
        f"{len(report.failed)} failed"
    )
    return "\n".join(output)


def print_morph_report(report: MorphReport) -> None:
    """Print a report with rich formatting."""
    out = get_rich_output()
    if not report.results:
        out.print_warning("No story files matched")
        return

    out.print_header("csfmorph", "Storybook CSF2 to CSF3 migration" + (" (dry run)" if report.dry_run else ""))
    table = out.create_table("Story modules", ["Module", "Action", "Status", "Files written"])
    for result in report.results:
        out.add_table_row(
            table,
            result.module_path,
            result.action.value if result.action else "-",
            "ok" if result.success else "failed",
            len(result.files_written),
        )
    out.print_table(table)

    diagnostics = [d for result in report.results for d in result.diagnostics]
    if diagnostics:
        out.print_section("Diagnostics")
    for diagnostic in diagnostics:
        if diagnostic.severity is Severity.ERROR:
            out.print_error(str(diagnostic))
        elif diagnostic.severity is Severity.WARNING:
            out.print_warning(str(diagnostic))
        else:
            out.print_info(str(diagnostic))

    summary = f"{len(report.results)} modules processed, {len(report.files_written)} files written"
    if report.dry_run:
        summary = "[dry-run] " + summary
    if report.success:
        out.print_success(summary)
    else:
        out.print_error(f"{summary}, {len(report.failed)} failed")


def cmd_morph(args, csfmorph: CsfMorph) -> None:
    """Handle rewrite, split and migrate commands."""
    from csfmorph.cli_entry import _is_machine_readable, _maybe_print_output

    action = MorphAction(args.command)
    report = csfmorph.run(args.patterns, action=action, root=args.root)

    if args.output:
        Path(args.output).write_text(format_morph_report(report, "json"), encoding="utf-8")
        print(f"Detailed results written to {args.output}", file=sys.stderr)

    if _is_machine_readable(args):
        _maybe_print_output(args, format_morph_report(report, "json"))
    elif getattr(args, "no_rich", False):
        _maybe_print_output(args, format_morph_report(report, "text"))
    else:
        print_morph_report(report)

    if not report.success:
        sys.exit(1)
