#!/usr/bin/env python3
"""
Tests for stored preferences and the constraint flags.
"""

import json

import pytest

from forge_coach.config import (
    ConstraintSettings,
    get_config_dir,
    get_config_value,
    load_config,
    parse_constraint_settings,
    set_config_value,
    settings_from_config,
)


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    home = tmp_path / 'forge_home'
    monkeypatch.setenv('FORGE_COACH_HOME', str(home))
    return home


class TestConfigFile:
    """Tests for the JSON config file"""

    def test_home_override(self, config_home):
        assert get_config_dir() == config_home
        assert config_home.is_dir()

    def test_missing_file_is_empty(self, config_home):
        assert load_config() == {}
        assert get_config_value('curriculum_path', 'fallback') == 'fallback'

    def test_set_and_get(self, config_home):
        set_config_value('curriculum_path', '/data/core1.json')
        assert get_config_value('curriculum_path') == '/data/core1.json'
        stored = json.loads((config_home / 'config.json').read_text())
        assert stored == {'curriculum_path': '/data/core1.json'}

    def test_corrupt_file_is_empty(self, config_home):
        config_home.mkdir(parents=True)
        (config_home / 'config.json').write_text('{not json')
        assert load_config() == {}


class TestSettings:
    """Tests for settings_from_config() and parse_constraint_settings()"""

    def test_defaults(self):
        assert settings_from_config({}) == ConstraintSettings()

    def test_stored_preferences(self):
        settings = settings_from_config({'enforce_concepts': False, 'constraint_profiles': False})
        assert settings.enforce is False
        assert settings.enable_di_mock_heuristics is True
        assert settings.enable_constraint_profiles is False

    def test_flags_are_removed(self):
        args = ['check', '--allow-early-concepts', 'a.swift', '--disable-di-mock-heuristics']
        settings, remaining = parse_constraint_settings(args)
        assert remaining == ['check', 'a.swift']
        assert settings == ConstraintSettings(enforce=False, enable_di_mock_heuristics=False)

    def test_flags_only_switch_off(self):
        defaults = ConstraintSettings(enable_constraint_profiles=False)
        settings, remaining = parse_constraint_settings(['audit'], defaults=defaults)
        assert remaining == ['audit']
        assert settings.enable_constraint_profiles is False

    def test_disable_profiles(self):
        settings, _ = parse_constraint_settings(['--disable-constraint-profiles'])
        assert settings.enable_constraint_profiles is False
        assert settings.enforce is True
