#!/usr/bin/env python3
"""
Curriculum-wide constraint profile audit.

Each challenge's reference solution is spliced into its starter code and
run through the violation checks, so a profile that its own solution
cannot satisfy is caught before a learner meets it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from rich.console import Console

from .constraints import build_constraint_index, constraint_violations, topic_profile
from .curriculum import Challenge, apply_solution_to_starter
from .report import FAILURE_GLYPH, SUCCESS_GLYPH

logger = logging.getLogger(__name__)

SKIP_NO_PROFILE = 'no profile'
SKIP_MISSING_SOLUTION = 'missing solution'


@dataclass
class AuditResult:
    """Outcome of verifying every challenge's profile"""
    checked: int = 0
    failures: List[Tuple[str, str]] = field(default_factory=list)  # (challenge id, first violation)
    skipped: Dict[str, int] = field(default_factory=dict)
    enabled: bool = True

    @property
    def passed(self) -> bool:
        return not self.failures

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())

    def skip(self, reason: str):
        self.skipped[reason] = self.skipped.get(reason, 0) + 1


def audit_constraint_profiles(
    challenges: Sequence[Challenge],
    enable_constraint_profiles: bool = True,
) -> AuditResult:
    """Check every challenge's solution against its effective profile"""
    if not enable_constraint_profiles:
        return AuditResult(enabled=False)

    index = build_constraint_index(challenges)
    result = AuditResult()

    for position, challenge in enumerate(challenges, 1):
        if challenge.constraint_profile is None and topic_profile(challenge.topic) is None:
            result.skip(SKIP_NO_PROFILE)
            continue
        solution = challenge.solution.strip()
        if not solution:
            result.skip(SKIP_MISSING_SOLUTION)
            continue

        combined = apply_solution_to_starter(challenge.starter_code, solution)
        violations = constraint_violations(combined, challenge, enabled=True, index=index)
        if violations:
            result.failures.append((challenge.display_id, violations[0].message))
        else:
            result.checked += 1

        if position % 25 == 0:
            logger.debug("Checked %d/%d...", position, len(challenges))

    return result


def print_audit(result: AuditResult, total: int, console: Optional[Console] = None) -> None:
    console = console or Console()
    if not result.enabled:
        console.print("Constraint profiles disabled; skipping verification.")
        return

    if result.passed:
        console.print(f"[green]{SUCCESS_GLYPH} Verified constraint profiles: {result.checked}[/green]")
    else:
        console.print(f"[red]{FAILURE_GLYPH} Constraint profile verification failed "
                      f"for {len(result.failures)} challenge(s).[/red]")
        for challenge_id, reason in result.failures:
            console.print(f"- {challenge_id}: {reason}", highlight=False)

    if result.skipped:
        reasons = ', '.join(sorted(f"{k}: {v}" for k, v in result.skipped.items()))
        console.print(f"Skipped: {result.skipped_total} ({reasons})")
    console.print(f"[dim]{total} challenge(s) in curriculum[/dim]")
