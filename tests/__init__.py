"""
Test package for the ActivityDash application.

Test Organization:
    unit/: Unit tests for individual components and functions
    conftest.py: Pytest configuration and shared fixtures
"""
