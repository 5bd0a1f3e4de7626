"""Exceptions raised or recorded while aggregating feature results."""

from typing import Any

from feature_results.models.feature import Scenario


def error_message(error: BaseException) -> str:
    """Message of an exception, without the quoting some types add to ``str``.

    ``KeyError("token")`` gives ``token`` rather than ``'token'``.
    """
    if len(error.args) == 1 and isinstance(error.args[0], str):
        return error.args[0]
    return str(error)


class FeatureError(Exception):
    """Canonical failure of a feature run.

    Args:
        message: Human-readable failure description
        cause: Underlying exception, exposed as ``__cause__``

    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message


class ScenarioOutlineError(FeatureError):
    """Failure of one outline iteration.

    The message is prefixed with the iteration's display metadata while the
    traceback stays the one of the original failure.
    """

    def __init__(self, display_meta: str, original: BaseException) -> None:
        super().__init__(f"{display_meta} {error_message(original)}")
        self.display_meta = display_meta
        self.original = original

    def __reduce__(self) -> tuple[Any, ...]:
        return type(self), (self.display_meta, self.original)


def wrap_outline_error(
    scenario: Scenario, error: BaseException
) -> ScenarioOutlineError:
    """Attach outline iteration context to a scenario failure."""
    wrapped = ScenarioOutlineError(scenario.display_meta, error)
    return wrapped.with_traceback(error.__traceback__)
