#!/usr/bin/env python3
"""
Configuration management for Forge Coach.
Handles constraint settings and user preferences stored locally.
"""

import os
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, List, Tuple


@dataclass(frozen=True)
class ConstraintSettings:
    """Switches passed explicitly to every constraint check"""
    enforce: bool = True                    # early-concept warnings may fail a check
    enable_di_mock_heuristics: bool = True
    enable_constraint_profiles: bool = True


FLAG_ALLOW_EARLY_CONCEPTS = '--allow-early-concepts'
FLAG_DISABLE_DI_MOCK = '--disable-di-mock-heuristics'
FLAG_DISABLE_PROFILES = '--disable-constraint-profiles'


def get_config_dir() -> Path:
    """Get the config directory (~/.forge_coach, or $FORGE_COACH_HOME)"""
    override = os.environ.get('FORGE_COACH_HOME')
    config_dir = Path(override) if override else Path.home() / '.forge_coach'
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Get the config file path"""
    return get_config_dir() / 'config.json'


def load_config() -> Dict[str, Any]:
    """Load configuration from file"""
    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r') as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except (json.JSONDecodeError, IOError):
            return {}
    return {}


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to file"""
    config_path = get_config_path()
    with open(config_path, 'w') as f:
        json.dump(config, f, indent=2)
    config_path.chmod(0o600)


def get_config_value(key: str, default: Any = None) -> Any:
    """Get a specific config value"""
    config = load_config()
    return config.get(key, default)


def set_config_value(key: str, value: Any) -> None:
    """Set a specific config value"""
    config = load_config()
    config[key] = value
    save_config(config)


def settings_from_config(config: Optional[Dict[str, Any]] = None) -> ConstraintSettings:
    """Build settings from stored preferences (missing keys keep defaults)"""
    if config is None:
        config = load_config()
    return ConstraintSettings(
        enforce=bool(config.get('enforce_concepts', True)),
        enable_di_mock_heuristics=bool(config.get('di_mock_heuristics', True)),
        enable_constraint_profiles=bool(config.get('constraint_profiles', True)),
    )


def parse_constraint_settings(
    args: List[str],
    defaults: ConstraintSettings = None,
) -> Tuple[ConstraintSettings, List[str]]:
    """
    Pull the constraint flags out of an argument list.

    Returns:
        (settings, remaining args in their original order)
    """
    defaults = defaults or ConstraintSettings()
    enforce = defaults.enforce
    di_mock = defaults.enable_di_mock_heuristics
    profiles = defaults.enable_constraint_profiles
    remaining = []

    for arg in args:
        if arg == FLAG_ALLOW_EARLY_CONCEPTS:
            enforce = False
        elif arg == FLAG_DISABLE_DI_MOCK:
            di_mock = False
        elif arg == FLAG_DISABLE_PROFILES:
            profiles = False
        else:
            remaining.append(arg)

    settings = ConstraintSettings(
        enforce=enforce,
        enable_di_mock_heuristics=di_mock,
        enable_constraint_profiles=profiles,
    )
    return settings, remaining
