"""
Centralized test suite for the JBR Private Limited website backend.

Test Organization:
- test_*.py - unit tests for validation, rate limiting and email composition
- integration/ - handler, site page and management command tests
- App-specific tests remain in their respective app directories (e.g., contact/tests.py)
"""
