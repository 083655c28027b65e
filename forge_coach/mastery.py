#!/usr/bin/env python3
"""
Per-topic gate deciding whether early-concept warnings block a check.

Every topic starts out blocking. Clean passes relax it, first to
``relax`` and then to ``warn``; repeated warned checks in either of those
states put the topic back to ``block``. Entries live in the config file
under ``constraint_mastery``.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .config import get_config_value, set_config_value
from .constraints import ChallengeTopic

logger = logging.getLogger(__name__)

MASTERY_KEY = 'constraint_mastery'

WARN_TO_BLOCK_THRESHOLD = 2
BLOCK_TO_RELAX_THRESHOLD = 3
RELAX_TO_WARN_THRESHOLD = 3


class MasteryState(Enum):
    WARN = 'warn'
    BLOCK = 'block'
    RELAX = 'relax'


@dataclass
class MasteryEntry:
    state: MasteryState = MasteryState.BLOCK
    warn_count: int = 0
    clean_count: int = 0

    def to_dict(self) -> dict:
        return {'state': self.state.value, 'warn': self.warn_count, 'clean': self.clean_count}

    @classmethod
    def from_dict(cls, data) -> 'MasteryEntry':
        """Unreadable fields fall back to the blocking default"""
        if not isinstance(data, dict):
            return cls()
        try:
            state = MasteryState(data.get('state'))
        except ValueError:
            state = MasteryState.BLOCK
        warn = data.get('warn', 0)
        clean = data.get('clean', 0)
        return cls(
            state=state,
            warn_count=warn if isinstance(warn, int) else 0,
            clean_count=clean if isinstance(clean, int) else 0,
        )


def load_mastery() -> Dict[str, MasteryEntry]:
    stored = get_config_value(MASTERY_KEY, {})
    if not isinstance(stored, dict):
        return {}
    return {topic: MasteryEntry.from_dict(data) for topic, data in stored.items()}


def save_mastery(entries: Dict[str, MasteryEntry]) -> None:
    set_config_value(MASTERY_KEY, {topic: entries[topic].to_dict() for topic in sorted(entries)})


def mastery_entry(topic: ChallengeTopic) -> MasteryEntry:
    return load_mastery().get(topic.value, MasteryEntry())


def early_concepts_block(topic: ChallengeTopic, enforce: bool = True) -> bool:
    """True when early-concept warnings should fail a check for this topic"""
    if not enforce:
        return False
    return mastery_entry(topic).state == MasteryState.BLOCK


def advance(entry: MasteryEntry, had_warnings: bool, passed: bool) -> MasteryEntry:
    """Apply one check outcome to an entry in place and return it"""
    if had_warnings:
        entry.clean_count = 0
        if entry.state != MasteryState.BLOCK:
            entry.warn_count += 1
            if entry.warn_count >= WARN_TO_BLOCK_THRESHOLD:
                entry.state = MasteryState.BLOCK
                entry.warn_count = 0
    elif passed:
        entry.warn_count = 0
        if entry.state == MasteryState.BLOCK:
            entry.clean_count += 1
            if entry.clean_count >= BLOCK_TO_RELAX_THRESHOLD:
                entry.state = MasteryState.RELAX
                entry.clean_count = 0
        elif entry.state == MasteryState.RELAX:
            entry.clean_count += 1
            if entry.clean_count >= RELAX_TO_WARN_THRESHOLD:
                entry.state = MasteryState.WARN
                entry.clean_count = 0
    return entry


def record_mastery(topic: ChallengeTopic, had_warnings: bool, passed: bool) -> MasteryEntry:
    """Record a check outcome for a topic and persist the new entry"""
    entries = load_mastery()
    entry = entries.get(topic.value, MasteryEntry())
    before = entry.state
    advance(entry, had_warnings, passed)
    if entry.state != before:
        logger.info("Topic %s moved from %s to %s", topic.value, before.value, entry.state.value)
    entries[topic.value] = entry
    save_mastery(entries)
    return entry
