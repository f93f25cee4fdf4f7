"""
Notifier Test Suite
===================

Test Organization
-----------------
- tests/unit/          : Fast unit tests with mocks (no external dependencies)

Testing Philosophy
------------------
- Listeners are pytest-mock mocks so calls can be asserted directly
- Use pytest markers (unit, config, logging) to select tests
- Follow AAA pattern: Arrange, Act, Assert
"""
