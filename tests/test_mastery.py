#!/usr/bin/env python3
"""
Tests for the per-topic early-concept gate.
"""

import json

import pytest

from forge_coach.config import get_config_path, set_config_value
from forge_coach.constraints import ChallengeTopic
from forge_coach.mastery import (
    MasteryEntry,
    MasteryState,
    advance,
    early_concepts_block,
    load_mastery,
    mastery_entry,
    record_mastery,
)

TOPIC = ChallengeTopic.CONDITIONALS


@pytest.fixture(autouse=True)
def config_home(tmp_path, monkeypatch):
    monkeypatch.setenv('FORGE_COACH_HOME', str(tmp_path / 'forge_home'))


class TestAdvance:
    """Tests for advance()"""

    def test_block_relaxes_after_three_clean_passes(self):
        entry = MasteryEntry()
        advance(entry, had_warnings=False, passed=True)
        advance(entry, had_warnings=False, passed=True)
        assert entry.state == MasteryState.BLOCK
        assert entry.clean_count == 2
        advance(entry, had_warnings=False, passed=True)
        assert entry == MasteryEntry(state=MasteryState.RELAX)

    def test_relax_moves_to_warn(self):
        entry = MasteryEntry(state=MasteryState.RELAX)
        for _ in range(3):
            advance(entry, had_warnings=False, passed=True)
        assert entry == MasteryEntry(state=MasteryState.WARN)

    def test_warn_stays_warn_on_clean_passes(self):
        entry = MasteryEntry(state=MasteryState.WARN, warn_count=1)
        advance(entry, had_warnings=False, passed=True)
        assert entry == MasteryEntry(state=MasteryState.WARN)

    def test_two_warned_checks_block_again(self):
        entry = MasteryEntry(state=MasteryState.WARN, clean_count=2)
        advance(entry, had_warnings=True, passed=True)
        assert entry == MasteryEntry(state=MasteryState.WARN, warn_count=1)
        advance(entry, had_warnings=True, passed=False)
        assert entry == MasteryEntry(state=MasteryState.BLOCK)

    def test_warnings_while_blocked_reset_clean_count(self):
        entry = MasteryEntry(clean_count=2)
        advance(entry, had_warnings=True, passed=False)
        assert entry == MasteryEntry()

    def test_failed_check_without_warnings_changes_nothing(self):
        entry = MasteryEntry(state=MasteryState.RELAX, warn_count=1, clean_count=1)
        advance(entry, had_warnings=False, passed=False)
        assert entry == MasteryEntry(state=MasteryState.RELAX, warn_count=1, clean_count=1)


class TestStoredMastery:
    """Tests for the config-backed gate"""

    def test_new_topic_blocks(self):
        assert mastery_entry(TOPIC) == MasteryEntry()
        assert early_concepts_block(TOPIC) is True

    def test_allow_early_concepts_never_blocks(self):
        assert early_concepts_block(TOPIC, enforce=False) is False

    def test_transitions_are_persisted(self):
        for _ in range(3):
            record_mastery(TOPIC, had_warnings=False, passed=True)
        assert early_concepts_block(TOPIC) is False
        assert early_concepts_block(ChallengeTopic.LOOPS) is True

        record_mastery(TOPIC, had_warnings=True, passed=False)
        record_mastery(TOPIC, had_warnings=True, passed=False)
        assert early_concepts_block(TOPIC) is True

    def test_stored_layout(self):
        record_mastery(TOPIC, had_warnings=False, passed=True)
        stored = json.loads(get_config_path().read_text())
        assert stored['constraint_mastery'] == {
            'conditionals': {'state': 'block', 'warn': 0, 'clean': 1},
        }

    def test_unreadable_entries_fall_back_to_block(self):
        set_config_value('constraint_mastery', {
            'conditionals': {'state': 'sleepy', 'warn': 'x'},
            'loops': 'relax',
        })
        assert load_mastery() == {'conditionals': MasteryEntry(), 'loops': MasteryEntry()}

    def test_non_object_store_is_ignored(self):
        set_config_value('constraint_mastery', ['conditionals'])
        assert load_mastery() == {}
