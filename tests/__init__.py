"""
emitkit Test Suite
==================

Test Organization
-----------------
- tests/unit/          : Fast unit tests with mocks (no external dependencies)
- tests/conftest.py    : Shared fixtures (registries, emitters, pending futures)

Testing Philosophy
------------------
- Tests drive the real registry and strategies; listeners are mocks
- Async behavior is controlled with manually settled futures, never sleeps
- Use pytest markers to categorize and selectively run tests
- Follow AAA pattern: Arrange, Act, Assert
"""
