"""
Unit Tests for the Xiangqi Engine

This package contains unit tests for all engine components.

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_rules.py

    # Run with coverage
    pytest tests/ --cov=xiangqi_engine --cov-report=html

    # Run specific test
    pytest tests/test_rules.py::TestCheckDetection::test_cannon_check_needs_screen

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
"""
