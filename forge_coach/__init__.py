"""
Forge Coach - Concept-Gated Challenge Checker

A CLI companion for a programming curriculum that flags solutions using
language concepts the learner has not been taught yet.
"""

__version__ = "0.1.0"
