#!/usr/bin/env python3
"""
Forge Coach - concept-gated challenge checker

Usage:
    forge-coach check challenge12.swift --challenge 12 --curriculum core1.json
    forge-coach check draft.swift --challenge 30 --topic collections
    forge-coach watch challenge12.swift --challenge 12 --curriculum core1.json
    forge-coach audit --curriculum core1.json --curriculum core2.json
    forge-coach concepts
    forge-coach config set curriculum_path core1.json
"""

import os
import sys
import json
import argparse
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from rich.console import Console
from rich.table import Table

from .config import (
    ConstraintSettings,
    FLAG_ALLOW_EARLY_CONCEPTS,
    FLAG_DISABLE_DI_MOCK,
    FLAG_DISABLE_PROFILES,
    get_config_path,
    get_config_value,
    load_config,
    parse_constraint_settings,
    set_config_value,
    settings_from_config,
)
from .constraints import (
    ALL_CONCEPTS,
    ChallengeTopic,
    ConstraintIndex,
    build_constraint_index,
    constraint_violations,
    constraint_warnings,
    introduction_number,
    missing_prerequisites,
    prerequisite_line,
)
from .curriculum import Challenge, CurriculumError, find_challenge, load_curriculum
from .log import setup_logging
from .mastery import early_concepts_block, record_mastery
from .report import FAILURE_GLYPH, print_diagnostics

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='forge-coach',
        description='Forge Coach - keep solutions within the concepts taught so far',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Constraint flags (accepted anywhere on the command line):
  {FLAG_ALLOW_EARLY_CONCEPTS}        Report early-concept warnings without failing
  {FLAG_DISABLE_DI_MOCK}  Skip dependency-injection/mocking heuristics
  {FLAG_DISABLE_PROFILES} Skip constraint profile violations
        """
    )
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase log verbosity (-v, -vv)')

    subparsers = parser.add_subparsers(dest='command')

    curriculum_help = 'Curriculum JSON file (repeatable; default from config)'

    check = subparsers.add_parser('check', help='Check a source file against a challenge')
    check.add_argument('file', help='Source file to check')
    check.add_argument('--challenge', required=True, help='Challenge number or id')
    check.add_argument('--curriculum', action='append', default=[], help=curriculum_help)
    check.add_argument('--topic', choices=[t.value for t in ChallengeTopic],
                       help='Topic for an ad-hoc challenge when no curriculum is given')

    watch = subparsers.add_parser('watch', help='Re-check a file every time it is saved')
    watch.add_argument('file', help='Source file to watch')
    watch.add_argument('--challenge', required=True, help='Challenge number or id')
    watch.add_argument('--curriculum', action='append', default=[], help=curriculum_help)
    watch.add_argument('--topic', choices=[t.value for t in ChallengeTopic],
                       help='Topic for an ad-hoc challenge when no curriculum is given')

    audit = subparsers.add_parser('audit', help='Verify every challenge solution against its profile')
    audit.add_argument('--curriculum', action='append', default=[], help=curriculum_help)

    concepts = subparsers.add_parser('concepts', help='List gated concepts and where they are introduced')
    concepts.add_argument('--curriculum', action='append', default=[], help=curriculum_help)

    config = subparsers.add_parser('config', help='Show or change stored preferences')
    config_commands = config.add_subparsers(dest='config_command')
    config_commands.add_parser('show', help='Print the config file')
    config_set = config_commands.add_parser('set', help='Store a value (parsed as JSON when possible)')
    config_set.add_argument('key')
    config_set.add_argument('value')

    return parser


def _curriculum_paths(explicit: List[str]) -> List[str]:
    if explicit:
        return explicit
    configured = get_config_value('curriculum_path')
    if not configured:
        return []
    if isinstance(configured, str):
        return [configured]
    return list(configured)


def _parse_challenge_key(raw: str):
    try:
        return int(raw)
    except ValueError:
        return raw


def resolve_challenge(args) -> Tuple[Challenge, ConstraintIndex]:
    """Find the target challenge and build the index it is judged against"""
    paths = _curriculum_paths(args.curriculum)
    key = _parse_challenge_key(args.challenge)

    if not paths:
        if not isinstance(key, int):
            raise CurriculumError("Ad-hoc checks need a numeric --challenge")
        topic = ChallengeTopic(args.topic) if args.topic else ChallengeTopic.GENERAL
        logger.info("No curriculum given; using the built-in introduction table")
        return Challenge(number=key, topic=topic), ConstraintIndex()

    challenges = load_curriculum(paths)
    challenge = find_challenge(challenges, key)
    if challenge is None:
        raise CurriculumError(f"Challenge {args.challenge} not found in curriculum")
    if args.topic and args.topic != challenge.topic.value:
        logger.warning("--topic %s ignored; %s has topic %s in the curriculum",
                       args.topic, challenge.display_id, challenge.topic.value)
    return challenge, build_constraint_index(challenges)


def cmd_check(args, settings: ConstraintSettings, console: Console) -> int:
    challenge, index = resolve_challenge(args)
    try:
        source = Path(args.file).read_text(encoding='utf-8')
    except OSError as e:
        console.print(f"[red]Error reading file: {e}[/red]")
        return EXIT_ERROR

    title = f" - {challenge.title}" if challenge.title else ''
    console.print(f"[bold]Challenge {challenge.number}{title}[/bold] [dim]({challenge.topic.value})[/dim]")

    prereqs = prerequisite_line(challenge)
    if prereqs:
        console.print(f"[dim]{prereqs}[/dim]")
    missing = missing_prerequisites(challenge, index)
    if missing:
        names = ', '.join(c.display_name for c in missing)
        console.print(f"[yellow]Prerequisites not yet introduced: {names}[/yellow]")

    warnings = constraint_warnings(
        source, challenge, index,
        enable_di_mock_heuristics=settings.enable_di_mock_heuristics,
    )
    violations = constraint_violations(
        source, challenge,
        enabled=settings.enable_constraint_profiles,
        index=index,
    )
    print_diagnostics(console, warnings, violations)

    blocked = bool(warnings) and early_concepts_block(challenge.topic, settings.enforce)
    if blocked:
        console.print(f"[red]{FAILURE_GLYPH} Constraint violation. Remove early concepts and retry.[/red]")
    passed = not violations and not blocked
    record_mastery(challenge.topic, had_warnings=bool(warnings), passed=passed)
    return EXIT_OK if passed else EXIT_VIOLATIONS


def cmd_watch(args, settings: ConstraintSettings, console: Console) -> int:
    from .watcher import FileWatcher, WatchSession

    challenge, index = resolve_challenge(args)
    watch_dir = os.path.dirname(os.path.abspath(args.file))
    if not os.path.isdir(watch_dir):
        console.print(f"[red]Error: directory not found: {watch_dir}[/red]")
        return EXIT_ERROR
    watcher = FileWatcher(
        session=WatchSession(filepath=args.file, challenge=challenge),
        index=index,
        settings=settings,
        console=console,
    )
    watcher.start()
    watcher.wait()
    return EXIT_OK if watcher.session.passing else EXIT_VIOLATIONS


def cmd_audit(args, settings: ConstraintSettings, console: Console) -> int:
    from .audit import audit_constraint_profiles, print_audit

    paths = _curriculum_paths(args.curriculum)
    if not paths:
        raise CurriculumError("No curriculum given (use --curriculum or set curriculum_path)")
    challenges = load_curriculum(paths)
    console.print(f"Verifying constraint profiles for {len(challenges)} challenge(s)...")
    result = audit_constraint_profiles(
        challenges,
        enable_constraint_profiles=settings.enable_constraint_profiles,
    )
    print_audit(result, total=len(challenges), console=console)
    return EXIT_OK if result.passed else EXIT_VIOLATIONS


def cmd_concepts(args, settings: ConstraintSettings, console: Console) -> int:
    paths = _curriculum_paths(args.curriculum)
    index = build_constraint_index(load_curriculum(paths)) if paths else ConstraintIndex()

    table = Table(title='Gated concepts')
    table.add_column('Concept')
    table.add_column('Name')
    table.add_column('Introduced', justify='right')
    for concept in ALL_CONCEPTS:
        number = introduction_number(concept, index)
        source = '' if concept in index.intro_by_concept else ' (legacy)'
        table.add_row(concept.value, concept.display_name, f"{number}{source}")
    console.print(table)
    return EXIT_OK


def _parse_config_value(raw: str):
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def cmd_config(args, settings: ConstraintSettings, console: Console) -> int:
    if args.config_command == 'set':
        value = _parse_config_value(args.value)
        set_config_value(args.key, value)
        console.print(f"Saved {args.key} = {json.dumps(value)}", style='green', markup=False, highlight=False)
        return EXIT_OK

    console.print(f"[dim]{get_config_path()}[/dim]")
    console.print_json(data=load_config())
    return EXIT_OK


COMMANDS = {
    'check': cmd_check,
    'watch': cmd_watch,
    'audit': cmd_audit,
    'concepts': cmd_concepts,
    'config': cmd_config,
}


def main(argv: Optional[List[str]] = None, console: Console = None) -> int:
    """Main CLI entry point"""
    argv = list(sys.argv[1:] if argv is None else argv)
    console = console or Console()

    settings, remaining = parse_constraint_settings(argv, defaults=settings_from_config())
    parser = build_parser()
    args = parser.parse_args(remaining)
    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    if not settings.enforce and args.command in ('check', 'watch'):
        console.print("[dim]Note: Early-concept usage will warn only (--allow-early-concepts).[/dim]")

    try:
        return COMMANDS[args.command](args, settings, console)
    except CurriculumError as e:
        console.print(f"[red]Error: {e}[/red]")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
