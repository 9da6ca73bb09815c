"""Exceptions raised by the tester itself (as opposed to test failures)."""


class TesterError(Exception):
    """Invalid use of the tester: bad scheduler invocation or unloadable test file."""

    __test__ = False
