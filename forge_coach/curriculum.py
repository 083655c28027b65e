#!/usr/bin/env python3
"""
Curriculum records and JSON loading.

Challenges are stored as JSON arrays of objects using camelCase keys.
A file may also hold an object whose values are such arrays (for example
bridge sets keyed by name); they are concatenated in key order.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .constraints import ChallengeTopic, Concept, ConstraintProfile

logger = logging.getLogger(__name__)


class CurriculumError(ValueError):
    """Raised when a curriculum file cannot be read or decoded"""


def _string_list(data: Dict[str, Any], key: str, where: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise CurriculumError(f"'{key}' must be a list of strings in {where}")
    return value


def _flag(data: Dict[str, Any], key: str, default: Optional[bool], where: str) -> Optional[bool]:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise CurriculumError(f"'{key}' must be true or false in {where}")
    return value


def profile_from_dict(data: Dict[str, Any], where: str = 'constraintProfile') -> ConstraintProfile:
    """Decode a constraintProfile object; null fields keep their defaults"""
    if not isinstance(data, dict):
        raise CurriculumError(f"constraintProfile must be an object in {where}")
    max_runtime_ms = data.get('maxRuntimeMs')
    if max_runtime_ms is not None and (isinstance(max_runtime_ms, bool) or not isinstance(max_runtime_ms, int)):
        raise CurriculumError(f"'maxRuntimeMs' must be an integer in {where}")
    return ConstraintProfile(
        allowed_imports=_string_list(data, 'allowedImports', where),
        disallowed_tokens=_string_list(data, 'disallowedTokens', where),
        required_tokens=_string_list(data, 'requiredTokens', where),
        allow_file_io=_flag(data, 'allowFileIO', True, where),
        allow_network=_flag(data, 'allowNetwork', False, where),
        allow_concurrency=_flag(data, 'allowConcurrency', True, where),
        max_runtime_ms=max_runtime_ms,
        require_optional_usage=_flag(data, 'requireOptionalUsage', None, where),
        require_collection_usage=_flag(data, 'requireCollectionUsage', None, where),
        require_closure_usage=_flag(data, 'requireClosureUsage', None, where),
    )


def _text(data: Dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise CurriculumError(f"'{key}' must be a string in {where}")
    return value


def _concepts(data: Dict[str, Any], key: str, where: str) -> List[Concept]:
    concepts = []
    for value in _string_list(data, key, where):
        try:
            concepts.append(Concept(value))
        except ValueError:
            raise CurriculumError(f"Unknown concept '{value}' in {where}") from None
    return concepts


@dataclass
class Challenge:
    """One curriculum challenge, as the constraint engine sees it"""
    number: int
    topic: ChallengeTopic = ChallengeTopic.GENERAL
    id: str = ''
    title: str = ''
    description: str = ''
    starter_code: str = ''
    expected_output: str = ''
    solution: str = ''
    constraint_profile: Optional[ConstraintProfile] = None
    introduces: List[Concept] = field(default_factory=list)
    requires: List[Concept] = field(default_factory=list)

    @property
    def display_id(self) -> str:
        return self.id or f"challenge{self.number}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Challenge':
        """Deserialize challenge from dictionary"""
        if not isinstance(data, dict):
            raise CurriculumError(f"Challenge record must be an object, got {type(data).__name__}")

        number = data.get('number')
        if isinstance(number, bool) or not isinstance(number, int):
            raise CurriculumError(f"Challenge record has no integer 'number': {data.get('id', '?')}")
        where = data.get('id') or f"challenge {number}"

        topic_raw = data.get('topic') or ChallengeTopic.GENERAL.value
        try:
            topic = ChallengeTopic(topic_raw)
        except ValueError:
            raise CurriculumError(f"Unknown topic '{topic_raw}' in {where}") from None

        profile_data = data.get('constraintProfile')
        text = {key: _text(data, key, where) for key in
                ('id', 'title', 'description', 'starterCode', 'expectedOutput', 'solution')}
        return cls(
            number=number,
            topic=topic,
            id=text['id'],
            title=text['title'],
            description=text['description'],
            starter_code=text['starterCode'],
            expected_output=text['expectedOutput'],
            solution=text['solution'],
            constraint_profile=profile_from_dict(profile_data, where) if profile_data is not None else None,
            introduces=_concepts(data, 'introduces', where),
            requires=_concepts(data, 'requires', where),
        )


def _records(payload: Any, path: Path) -> List[Dict[str, Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        records = []
        for key, value in payload.items():
            if isinstance(value, list):
                records.extend(value)
            else:
                logger.warning("Ignoring non-list entry '%s' in %s", key, path)
        return records
    raise CurriculumError(f"{path}: expected a list of challenges")


def load_challenges(path: Union[str, Path]) -> List[Challenge]:
    """Load every challenge in one JSON file"""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except FileNotFoundError:
        raise CurriculumError(f"Curriculum file not found: {path}") from None
    except json.JSONDecodeError as e:
        raise CurriculumError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise CurriculumError(f"Unable to read {path}: {e}") from e

    challenges = [Challenge.from_dict(record) for record in _records(payload, path)]
    logger.info("Loaded %d challenge(s) from %s", len(challenges), path)
    return challenges


def load_curriculum(paths: Iterable[Union[str, Path]]) -> List[Challenge]:
    """Load and concatenate several curriculum files, ordered by number"""
    challenges: List[Challenge] = []
    for path in paths:
        challenges.extend(load_challenges(path))
    return sorted(challenges, key=lambda c: c.number)


def find_challenge(challenges: Iterable[Challenge], key: Union[int, str]) -> Optional[Challenge]:
    """Look a challenge up by number or by id"""
    for challenge in challenges:
        if isinstance(key, int) and challenge.number == key:
            return challenge
        if isinstance(key, str) and (challenge.id == key or str(challenge.number) == key):
            return challenge
    return None


def apply_solution_to_starter(starter_code: str, solution: str) -> str:
    """
    Splice a reference solution into starter code in place of the first
    `// TODO:` line, keeping that line's indentation. Without a TODO the
    solution is appended.
    """
    lines = starter_code.split('\n')
    for index, line in enumerate(lines):
        if '// TODO:' not in line:
            continue
        indent = line[:len(line) - len(line.lstrip(' \t'))]
        solution_lines = [f"{indent}{s}" if s else '' for s in solution.split('\n')]
        lines[index:index + 1] = solution_lines
        return '\n'.join(lines)
    return starter_code + '\n' + solution + '\n'
