"""Request and response models."""

import re

from pydantic import BaseModel

from fizzbuzz.request import Request
from fizzbuzz.statistics import RequestStatistic

int_re = re.compile(r"[+-]?[0-9]+")
# 64-bit signed integers
INT_MIN, INT_MAX = -(2**63), 2**63 - 1


class ParameterError(Exception):
    """Exception raised when a query parameter is malformed."""

    def __init__(self, message):
        self.message = message
        super().__init__(message)


class RenderQuery(BaseModel):
    """GET Render

    Integers are kept raw so that malformed values are reported with the
    string that was given.
    """

    limit: str = ""
    int1: str = ""
    int2: str = ""
    str1: str = ""
    str2: str = ""

    def to_request(self) -> Request:
        """Parse the integer parameters

        Raises:
            ParameterError: first parameter that is not an integer
        """
        values = {}
        for field in ("limit", "int1", "int2"):
            raw = getattr(self, field)
            if (
                not int_re.fullmatch(raw)
                or len(raw.lstrip("+-").lstrip("0")) > 19
                or not INT_MIN <= int(raw) <= INT_MAX
            ):
                raise ParameterError(
                    f"{field} parameter must be an integer, value {raw} was given"
                )
            values[field] = int(raw)
        return Request(str1=self.str1, str2=self.str2, **values)


class ApiResponse(BaseModel):
    """Response envelope"""

    error: bool
    response: str | RequestStatistic | None = None
