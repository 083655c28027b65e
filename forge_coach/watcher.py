#!/usr/bin/env python3
"""
File watcher for the check-on-save workflow.
Monitors a learner's challenge file and re-runs the constraint checks
every time its contents change.
"""

import os
import time
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler, FileModifiedEvent

from rich.console import Console

from .config import ConstraintSettings
from .constraints import (
    ConceptWarning,
    ConstraintIndex,
    Violation,
    constraint_violations,
    constraint_warnings,
)
from .curriculum import Challenge
from .mastery import early_concepts_block
from .report import FAILURE_GLYPH, print_diagnostics

logger = logging.getLogger(__name__)


@dataclass
class WatchSession:
    """Tracks the state of a check-on-save session"""
    filepath: str
    challenge: Challenge
    reviews: int = 0
    last_warnings: List[ConceptWarning] = field(default_factory=list)
    last_violations: List[Violation] = field(default_factory=list)
    warnings_block: bool = False

    @property
    def passing(self) -> bool:
        if self.reviews == 0 or self.last_violations:
            return False
        return not (self.warnings_block and self.last_warnings)


class ConstraintFileReviewer(FileSystemEventHandler):
    """Watches one file and prints constraint diagnostics on change"""

    DEBOUNCE_SECONDS = 0.5

    def __init__(
        self,
        session: WatchSession,
        index: ConstraintIndex,
        settings: ConstraintSettings = None,
        console: Console = None,
    ):
        super().__init__()
        self.filepath = os.path.abspath(session.filepath)
        self.session = session
        self.index = index
        self.settings = settings or ConstraintSettings()
        self.console = console or Console()
        self.last_modified = 0.0
        self.last_content: Optional[str] = None

    def on_modified(self, event):
        """Called when a file in the watched directory is modified"""
        if not isinstance(event, FileModifiedEvent):
            return
        if os.path.abspath(event.src_path) != self.filepath:
            return

        current_time = time.time()
        if current_time - self.last_modified < self.DEBOUNCE_SECONDS:
            return
        self.last_modified = current_time
        self.review_file()

    def review_file(self) -> bool:
        """Read the file and review it if its contents changed"""
        try:
            with open(self.filepath, 'r', encoding='utf-8') as f:
                code = f.read()
        except OSError as e:
            self.console.print(f"[red]Error reading file: {e}[/red]")
            return False

        if code == self.last_content:
            return False
        self.last_content = code

        warnings, violations = self.review(code)
        self.console.print(f"\n[dim]{'─' * 70}[/dim]")
        self.console.print(f"[cyan]Checking {os.path.basename(self.filepath)} "
                           f"(review {self.session.reviews})...[/cyan]")
        print_diagnostics(self.console, warnings, violations)
        if warnings and self.session.warnings_block:
            self.console.print(f"[red]{FAILURE_GLYPH} Constraint violation. Remove early concepts and retry.[/red]")
        return True

    def review(self, code: str) -> Tuple[List[ConceptWarning], List[Violation]]:
        """Run both checks and record the outcome on the session"""
        challenge = self.session.challenge
        warnings = constraint_warnings(
            code,
            challenge,
            self.index,
            enable_di_mock_heuristics=self.settings.enable_di_mock_heuristics,
        )
        violations = constraint_violations(
            code,
            challenge,
            enabled=self.settings.enable_constraint_profiles,
            index=self.index,
        )
        self.session.reviews += 1
        self.session.last_warnings = warnings
        self.session.last_violations = violations
        logger.debug("Review %d: %d warning(s), %d violation(s)",
                     self.session.reviews, len(warnings), len(violations))
        return warnings, violations


class FileWatcher:
    """Manages the file watching process"""

    def __init__(
        self,
        session: WatchSession,
        index: ConstraintIndex,
        settings: ConstraintSettings = None,
        console: Console = None,
    ):
        self.session = session
        self.index = index
        self.settings = settings or ConstraintSettings()
        self.console = console or Console()
        self.observer = None
        self.handler = None

    def start(self):
        """Review once, then start watching the file"""
        self.session.warnings_block = early_concepts_block(
            self.session.challenge.topic, self.settings.enforce)
        self.handler = ConstraintFileReviewer(
            session=self.session,
            index=self.index,
            settings=self.settings,
            console=self.console,
        )
        if os.path.exists(self.handler.filepath):
            self.handler.review_file()

        self.observer = Observer()
        watch_dir = os.path.dirname(self.handler.filepath)
        self.observer.schedule(self.handler, path=watch_dir, recursive=False)
        self.observer.start()

        self.console.print(f"\n[green]Watching {os.path.basename(self.session.filepath)} for changes...[/green]")
        self.console.print("[dim]Constraints are re-checked each time you save the file. Ctrl+C to stop.[/dim]")

    def stop(self):
        """Stop watching"""
        if self.observer:
            self.observer.stop()
            self.observer.join()

    def wait(self):
        """Block until interrupted"""
        try:
            while True:
                time.sleep(0.5)
        except KeyboardInterrupt:
            self.console.print("\n[dim]Stopping file watcher...[/dim]")
        finally:
            self.stop()
