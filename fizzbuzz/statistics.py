"""Rendering statistics"""

from dataclasses import dataclass
from threading import Lock
import logging

from fizzbuzz.request import Request

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestStatistic:
    request: Request
    total: int


class Statistics:
    """Thread-safe count of rendered requests.

    The most recorded request is tracked on every update. A request only
    replaces the current top once its count is strictly greater, so on a
    tie the request that reached the count first stays on top.
    """

    def __init__(self):
        self._totals: dict[Request, int] = {}
        self._top = Request()
        self._lock = Lock()

    def record(self, request: Request):
        """Record one rendering of request

        Args:
            request: rendered request
        """
        with self._lock:
            total = self._totals.get(request, 0) + 1
            self._totals[request] = total
            if total > self._totals.get(self._top, 0):
                self._top = request

    def _get(self, request: Request) -> RequestStatistic | None:
        total = self._totals.get(request, 0)
        if total == 0:
            return None
        return RequestStatistic(request=request, total=total)

    def get_statistic(self, request: Request) -> RequestStatistic | None:
        """Get statistic of a request

        Returns:
            None: the request was never recorded
            RequestStatistic: request and its total
        """
        with self._lock:
            return self._get(request)

    def get_top_statistic(self) -> RequestStatistic | None:
        """Get statistic of the most recorded request"""
        with self._lock:
            return self._get(self._top)

    def reset(self):
        """Clear every recorded statistic"""
        with self._lock:
            self._totals = {}
            self._top = Request()
        log.info("Statistics reset")
