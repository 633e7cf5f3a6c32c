"""FizzBuzz render request."""

from dataclasses import dataclass


class RenderError(Exception):
    """Exception raised when a request cannot be rendered."""

    def __init__(self, message):
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class Request:
    """Request rendered according to the FizzBuzz algorithm.

    Items go from 1 to ``limit``. Multiples of ``int1`` (or ``int2``) are
    replaced by ``str1`` (or ``str2``), multiples of both by ``str1 + str2``.
    """

    limit: int = 0
    int1: int = 0
    int2: int = 0
    str1: str = ""
    str2: str = ""

    def validate(self) -> RenderError | None:
        """Return the first violated constraint, None if the request is valid"""
        for field in ("limit", "int1", "int2"):
            value = getattr(self, field)
            if value < 1:
                return RenderError(
                    f"{field} parameter must be >= 1, value {value} was given"
                )
        return None

    def item(self, i: int) -> str:
        """Render the item at position i"""
        if i % self.int1 == 0 and i % self.int2 == 0:
            return self.str1 + self.str2
        if i % self.int1 == 0:
            return self.str1
        if i % self.int2 == 0:
            return self.str2
        return str(i)
