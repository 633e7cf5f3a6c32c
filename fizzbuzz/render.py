"""Render requests according to the FizzBuzz algorithm"""

from threading import Event, Lock, Thread
import logging
import queue

from fizzbuzz.request import RenderError, Request
from fizzbuzz.statistics import Statistics

log = logging.getLogger(__name__)

# seconds between two checks of the cancellation flag
POLL_INTERVAL = 0.05

_CLOSED = object()


class Response:
    """Items of a rendered request.

    Items are handed over one at a time, so the producer never runs more
    than one item ahead of the consumer. Iterating yields the items in
    order until the producer closes the stream or the response is
    cancelled. Nothing is yielded once the response is cancelled. Leaving
    a ``with`` block cancels the response.

    A response has a single consumer.
    """

    def __init__(self, error: RenderError | None = None):
        self.error = error
        self._items = queue.Queue(maxsize=1)
        self._cancelled = Event()
        self._closed = Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self):
        """Stop the producer at its next item"""
        self._cancelled.set()

    def put(self, item) -> bool:
        """Hand an item to the consumer, waiting for it to be taken

        Returns:
            True: the item was queued
            False: the response was cancelled first
        """
        while not self._cancelled.is_set():
            try:
                self._items.put(item, timeout=POLL_INTERVAL)
                return True
            except queue.Full:
                continue
        return False

    def close(self) -> bool:
        """Mark the end of the items"""
        return self.put(_CLOSED)

    def __iter__(self):
        try:
            while not self._closed.is_set() and not self._cancelled.is_set():
                try:
                    item = self._items.get(timeout=POLL_INTERVAL)
                except queue.Empty:
                    continue
                if item is _CLOSED:
                    self._closed.set()
                    return
                if self._cancelled.is_set():
                    return
                yield item
        finally:
            # consumer is gone, whether it read everything or not
            self.cancel()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.cancel()


class Renderer:
    """Renderer

    Every call to render is recorded in the statistics, valid or not.
    Items of each valid request are produced by a thread of its own, so a
    slow consumer never holds up other renders.
    """

    def __init__(self, statistics: Statistics):
        """Init Renderer.

        Args:
            statistics: store recording every rendered request
        """
        self.statistics = statistics
        self._producers: dict[Response, Thread] = {}
        self._stopped = False
        self._lock = Lock()

    def render(self, request: Request) -> Response:
        """Render request

        Args:
            request: request to render

        Returns:
            Response: error set and no items if the request is invalid

        Raises:
            RuntimeError: the renderer was shut down
        """
        if self._stopped:
            raise RuntimeError("Renderer is shut down")
        self.statistics.record(request)
        if (error := request.validate()) is not None:
            response = Response(error)
            response.close()
            return response

        response = Response()
        producer = Thread(
            target=self._produce,
            args=(request, response),
            name=f"render-{id(response):x}",
            daemon=True,
        )
        with self._lock:
            if self._stopped:
                raise RuntimeError("Renderer is shut down")
            self._producers[response] = producer
        log.debug("Request rendering started %s", request)
        try:
            producer.start()
        except RuntimeError:
            with self._lock:
                self._producers.pop(response, None)
            raise
        return response

    def _produce(self, request: Request, response: Response):
        try:
            for i in range(1, request.limit + 1):
                if not response.put(request.item(i)):
                    log.debug("Request rendering cancelled %s", request)
                    return
            response.close()
            log.debug("Request rendering done %s", request)
        except Exception:  # pylint: disable=broad-exception-caught
            response.cancel()
            log.error("Render task failed", exc_info=True)
        finally:
            with self._lock:
                self._producers.pop(response, None)

    def pending(self) -> int:
        """Number of responses still being produced"""
        with self._lock:
            return len(self._producers)

    def shutdown(self):
        """Cancel every pending response and wait for their producers"""
        with self._lock:
            self._stopped = True
            producers = list(self._producers.items())
        for response, _ in producers:
            response.cancel()
        for _, producer in producers:
            producer.join()
        log.info("Renderer stopped, %d pending responses cancelled", len(producers))
