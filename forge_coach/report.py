#!/usr/bin/env python3
"""
Console rendering of constraint diagnostics.
"""

from typing import Sequence

from rich.console import Console

from .constraints import ConceptWarning, Violation

WARNING_GLYPH = '⚠️'
FAILURE_GLYPH = '✗'
SUCCESS_GLYPH = '✓'


def warning_line(warning: ConceptWarning) -> str:
    return f"{WARNING_GLYPH} {warning.message}"


def violation_line(violation: Violation) -> str:
    return f"{FAILURE_GLYPH} {violation.message}"


def print_diagnostics(
    console: Console,
    warnings: Sequence[ConceptWarning],
    violations: Sequence[Violation],
) -> None:
    """Print warnings in yellow and violations in red"""
    for warning in warnings:
        console.print(f"[yellow]{warning_line(warning)}[/yellow]", highlight=False)
    for violation in violations:
        console.print(f"[red]{violation_line(violation)}[/red]", highlight=False)
    if not warnings and not violations:
        console.print(f"[green]{SUCCESS_GLYPH} No constraint issues found.[/green]")
