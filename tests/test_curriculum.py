#!/usr/bin/env python3
"""
Tests for curriculum records and JSON loading.
"""

import json

import pytest

from forge_coach.constraints import ChallengeTopic, Concept, ConstraintProfile
from forge_coach.curriculum import (
    Challenge,
    CurriculumError,
    apply_solution_to_starter,
    find_challenge,
    load_challenges,
    load_curriculum,
    profile_from_dict,
)


def record(**overrides):
    data = {
        'number': 12,
        'id': 'core12',
        'title': 'Compare scores',
        'topic': 'conditionals',
        'introduces': ['comparisons'],
        'requires': ['ifElse'],
    }
    data.update(overrides)
    return data


class TestChallenge:
    """Tests for Challenge.from_dict()"""

    def test_from_dict(self):
        challenge = Challenge.from_dict(record())
        assert challenge.number == 12
        assert challenge.topic == ChallengeTopic.CONDITIONALS
        assert challenge.introduces == [Concept.COMPARISONS]
        assert challenge.requires == [Concept.IF_ELSE]
        assert challenge.constraint_profile is None
        assert challenge.display_id == 'core12'

    def test_defaults(self):
        challenge = Challenge.from_dict({'number': 3})
        assert challenge.topic == ChallengeTopic.GENERAL
        assert challenge.introduces == []
        assert challenge.display_id == 'challenge3'

    def test_profile_decoding(self):
        challenge = Challenge.from_dict(record(constraintProfile={
            'disallowedTokens': ['for', 'while'],
            'allowFileIO': False,
            'requireOptionalUsage': True,
        }))
        profile = challenge.constraint_profile
        assert profile.disallowed_tokens == ('for', 'while')
        assert profile.allow_file_io is False
        assert profile.allow_network is False
        assert profile.require_optional_usage is True
        assert profile.require_closure_usage is None

    def test_null_fields_use_defaults(self):
        challenge = Challenge.from_dict(record(title=None, introduces=None, constraintProfile={
            'allowedImports': None,
            'allowNetwork': None,
            'requireClosureUsage': None,
        }))
        assert challenge.title == ''
        assert challenge.introduces == []
        assert challenge.constraint_profile == ConstraintProfile()

    def test_empty_profile_object(self):
        challenge = Challenge.from_dict(record(constraintProfile={}))
        assert challenge.constraint_profile == ConstraintProfile()

    def test_list_fields_must_be_string_lists(self):
        with pytest.raises(CurriculumError, match="'allowedImports' must be a list of strings"):
            profile_from_dict({'allowedImports': 'Foundation'})
        with pytest.raises(CurriculumError, match="'disallowedTokens'"):
            profile_from_dict({'disallowedTokens': ['for', 3]})
        with pytest.raises(CurriculumError, match="'requires'"):
            Challenge.from_dict(record(requires='ifElse'))

    def test_flags_must_be_booleans(self):
        with pytest.raises(CurriculumError, match="'allowFileIO' must be true or false in core12"):
            Challenge.from_dict(record(constraintProfile={'allowFileIO': 'no'}))
        with pytest.raises(CurriculumError, match="'maxRuntimeMs'"):
            profile_from_dict({'maxRuntimeMs': 'fast'})

    def test_profile_must_be_object(self):
        with pytest.raises(CurriculumError, match="constraintProfile must be an object"):
            Challenge.from_dict(record(constraintProfile=['for']))

    def test_text_fields_must_be_strings(self):
        with pytest.raises(CurriculumError, match="'solution' must be a string"):
            Challenge.from_dict(record(solution=['let a = 1']))

    def test_unknown_concept(self):
        with pytest.raises(CurriculumError, match="Unknown concept 'loops'"):
            Challenge.from_dict(record(introduces=['loops']))

    def test_unknown_topic(self):
        with pytest.raises(CurriculumError, match="Unknown topic"):
            Challenge.from_dict(record(topic='poetry'))

    def test_number_required(self):
        with pytest.raises(CurriculumError):
            Challenge.from_dict({'id': 'x'})
        with pytest.raises(CurriculumError):
            Challenge.from_dict({'number': True})

    def test_record_must_be_object(self):
        with pytest.raises(CurriculumError):
            Challenge.from_dict(['number', 1])


class TestLoading:
    """Tests for load_challenges() / load_curriculum()"""

    def test_load_list(self, tmp_path):
        path = tmp_path / 'core.json'
        path.write_text(json.dumps([record(), record(number=2, id='core2')]))
        challenges = load_challenges(path)
        assert [c.number for c in challenges] == [12, 2]

    def test_load_keyed_sets(self, tmp_path):
        path = tmp_path / 'bridge.json'
        path.write_text(json.dumps({'bridgeA': [record(number=5)], 'bridgeB': [record(number=6)]}))
        assert [c.number for c in load_challenges(path)] == [5, 6]

    def test_curriculum_sorted_by_number(self, tmp_path):
        first = tmp_path / 'one.json'
        second = tmp_path / 'two.json'
        first.write_text(json.dumps([record(number=9)]))
        second.write_text(json.dumps([record(number=4)]))
        assert [c.number for c in load_curriculum([first, second])] == [4, 9]

    def test_missing_file(self, tmp_path):
        with pytest.raises(CurriculumError, match="not found"):
            load_challenges(tmp_path / 'nope.json')

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text('[{"number": ')
        with pytest.raises(CurriculumError, match="Invalid JSON"):
            load_challenges(path)

    def test_scalar_payload(self, tmp_path):
        path = tmp_path / 'scalar.json'
        path.write_text('42')
        with pytest.raises(CurriculumError):
            load_challenges(path)


class TestHelpers:

    def test_find_challenge(self):
        challenges = [Challenge(number=1, id='core1'), Challenge(number=2, id='core2')]
        assert find_challenge(challenges, 2).id == 'core2'
        assert find_challenge(challenges, 'core1').number == 1
        assert find_challenge(challenges, 7) is None

    def test_apply_solution_replaces_todo(self):
        starter = "func main() {\n    // TODO: print the total\n}"
        combined = apply_solution_to_starter(starter, "let total = 3\nprint(total)")
        assert combined == "func main() {\n    let total = 3\n    print(total)\n}"

    def test_apply_solution_without_todo(self):
        assert apply_solution_to_starter("let a = 1", "print(a)") == "let a = 1\nprint(a)\n"
