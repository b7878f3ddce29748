"""Pytest configuration and fixtures for mustache_usage tests."""

import pytest

from mustache_usage import ScanOptions, UsageScanner


@pytest.fixture
def scanner():
    """Scanner with default options."""
    return UsageScanner()


@pytest.fixture
def scanner_no_collapse():
    """Scanner that keeps nested names separate from outer ones."""
    return UsageScanner(ScanOptions(collapse_nested=False))


@pytest.fixture
def scanner_with_names():
    """Scanner that stamps each record with its name."""
    return UsageScanner(ScanOptions(include_name=True))

