"""Errors raised by CoM motion representations."""


class ComMotionError(Exception):
    """Base class for motion contract violations."""


class DimensionMismatch(ComMotionError, ValueError):
    """Raised when a coefficient vector has the wrong length."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Coefficient vector has length {actual}, expected {expected}",
        )


class OutOfRangeError(ComMotionError, ValueError):
    """Raised when a time argument lies outside the motion horizon."""

    def __init__(self, t: float, total_time: float):
        self.t = t
        self.total_time = total_time
        super().__init__(f"Time {t!r} outside motion horizon [0, {total_time!r}]")


class UnderconstrainedError(ComMotionError, RuntimeError):
    """Raised when the end-at-start condition cannot be enforced."""
