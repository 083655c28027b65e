#!/usr/bin/env python3
"""
Tests for the check-on-save reviewer and watcher lifecycle.
"""

import io

import pytest
from rich.console import Console
from watchdog.events import FileModifiedEvent

from forge_coach.config import ConstraintSettings
from forge_coach.constraints import ChallengeTopic, Concept, ConstraintIndex, ViolationKind
from forge_coach.curriculum import Challenge
from forge_coach.watcher import ConstraintFileReviewer, FileWatcher, WatchSession


def make_reviewer(path, challenge, settings=None):
    session = WatchSession(filepath=str(path), challenge=challenge)
    output = io.StringIO()
    reviewer = ConstraintFileReviewer(
        session=session,
        index=ConstraintIndex(),
        settings=settings,
        console=Console(file=output, width=120),
    )
    return reviewer, output


class TestWatchSession:

    def test_not_passing_before_first_review(self, tmp_path):
        session = WatchSession(filepath=str(tmp_path / 'a.swift'), challenge=Challenge(number=1))
        assert not session.passing


class TestConstraintFileReviewer:
    """Tests for ConstraintFileReviewer"""

    def test_review_records_outcome(self, tmp_path):
        reviewer, _ = make_reviewer(tmp_path / 'a.swift', Challenge(number=40, topic=ChallengeTopic.OPTIONALS))
        warnings, violations = reviewer.review("let value = 1\nif value > 0 { }")
        assert [v.kind for v in violations] == [ViolationKind.OPTIONAL_USAGE_REQUIRED]
        assert warnings == []
        assert reviewer.session.reviews == 1
        assert not reviewer.session.passing

        reviewer.review("let value: Int? = nil")
        assert reviewer.session.reviews == 2
        assert reviewer.session.passing

    def test_settings_are_respected(self, tmp_path):
        settings = ConstraintSettings(enforce=False, enable_constraint_profiles=False)
        reviewer, _ = make_reviewer(tmp_path / 'a.swift',
                                    Challenge(number=1, topic=ChallengeTopic.OPTIONALS), settings)
        warnings, violations = reviewer.review("if x { }")
        assert [w.concept for w in warnings] == [Concept.IF_ELSE]
        assert violations == []
        assert reviewer.session.passing

    def test_blocking_warnings_fail_the_session(self, tmp_path):
        path = tmp_path / 'a.swift'
        path.write_text("if x { }\n")
        reviewer, output = make_reviewer(path, Challenge(number=1))
        reviewer.session.warnings_block = True
        assert reviewer.review_file() is True
        assert not reviewer.session.passing
        assert "Constraint violation. Remove early concepts and retry." in output.getvalue()

        path.write_text("let a = 1\n")
        reviewer.review_file()
        assert reviewer.session.passing

    def test_warnings_when_enforced(self, tmp_path):
        reviewer, _ = make_reviewer(tmp_path / 'a.swift', Challenge(number=1))
        warnings, _ = reviewer.review("if x { }")
        assert [w.concept for w in warnings] == [Concept.IF_ELSE]

    def test_review_file_skips_unchanged(self, tmp_path):
        path = tmp_path / 'a.swift'
        path.write_text("let a = 1\n")
        reviewer, output = make_reviewer(path, Challenge(number=1))
        assert reviewer.review_file() is True
        assert reviewer.review_file() is False
        assert reviewer.session.reviews == 1
        assert "No constraint issues found." in output.getvalue()

    def test_missing_file(self, tmp_path):
        reviewer, output = make_reviewer(tmp_path / 'gone.swift', Challenge(number=1))
        assert reviewer.review_file() is False
        assert "Error reading file" in output.getvalue()

    def test_on_modified_filters_other_files(self, tmp_path):
        path = tmp_path / 'a.swift'
        path.write_text("if x { }\n")
        reviewer, output = make_reviewer(path, Challenge(number=1))

        reviewer.on_modified(FileModifiedEvent(str(tmp_path / 'other.swift')))
        assert reviewer.session.reviews == 0

        reviewer.on_modified(FileModifiedEvent(str(path)))
        assert reviewer.session.reviews == 1
        assert "Possible early use of if/else" in output.getvalue()


class TestFileWatcher:

    @pytest.fixture(autouse=True)
    def config_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv('FORGE_COACH_HOME', str(tmp_path / 'forge_home'))

    def test_start_reviews_and_reads_gate(self, tmp_path):
        path = tmp_path / 'a.swift'
        path.write_text("if x { }\n")
        output = io.StringIO()
        watcher = FileWatcher(
            session=WatchSession(filepath=str(path), challenge=Challenge(number=1)),
            index=ConstraintIndex(),
            console=Console(file=output, width=120),
        )
        watcher.start()
        watcher.stop()
        assert watcher.session.warnings_block is True
        assert watcher.session.reviews == 1
        assert not watcher.session.passing
        assert "Watching a.swift for changes" in output.getvalue()

    def test_allow_early_concepts_does_not_block(self, tmp_path):
        path = tmp_path / 'a.swift'
        path.write_text("if x { }\n")
        watcher = FileWatcher(
            session=WatchSession(filepath=str(path), challenge=Challenge(number=1)),
            index=ConstraintIndex(),
            settings=ConstraintSettings(enforce=False),
            console=Console(file=io.StringIO(), width=120),
        )
        watcher.start()
        watcher.stop()
        assert watcher.session.warnings_block is False
        assert watcher.session.passing
