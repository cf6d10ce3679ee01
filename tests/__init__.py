"""
Test suite for symcalc

Contains:
- tests/unit/          : Unit tests for individual modules
- tests/conftest.py    : Shared symbols, modes and engine fixtures
"""
