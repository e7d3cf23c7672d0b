"""
Background turn-path computation.

A caller posts TurnParams and later collects a TurnPathResponse. Only the
newest request matters: responses are tagged with the request id and any that
belong to an older request are dropped. In-flight work is never cancelled.

Two failure channels are kept apart:
  - domain: the params cannot be flown -> TurnPathResponse.error
  - transport: the worker is closed, crashed or too slow -> WorkerError raised
"""
from __future__ import annotations

import itertools
import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from config import DEFAULT_CONFIG, EngineConfig
from .exceptions import WorkerBusy, WorkerClosed, WorkerCrashed, WorkerError, WorkerTimeout
from .models import TurnParams, TurnPath
from .turn import compute_turn_path, validate_turn_params

logger = logging.getLogger(__name__)

_STOP = None
_POLL_SLICE_S = 0.05


@dataclass(frozen=True)
class TurnPathRequest:
    request_id: int
    params: TurnParams


@dataclass(frozen=True)
class TurnPathResponse:
    request_id: int
    path: Optional[TurnPath] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


ComputeFn = Callable[[TurnParams, EngineConfig], TurnPath]


class TurnPathWorker:
    """
    One daemon thread fed by a bounded request queue.

    Usage:
        with TurnPathWorker() as worker:
            worker.submit(params)
            response = worker.latest()
    """

    def __init__(self, cfg: EngineConfig = DEFAULT_CONFIG,
                 compute: ComputeFn = compute_turn_path) -> None:
        self.cfg = cfg
        self._compute = compute
        self._requests: "queue.Queue[Optional[TurnPathRequest]]" = queue.Queue(
            maxsize=cfg.worker_max_pending
        )
        self._responses: "queue.Queue[TurnPathResponse]" = queue.Queue()
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._latest_id = 0
        self._closed = False
        self._failure: Optional[BaseException] = None

        self._thread = threading.Thread(target=self._run, name="turn-path-worker", daemon=True)
        self._thread.start()

    # -------------------------------
    # worker thread
    # -------------------------------

    def _run(self) -> None:
        try:
            while True:
                request = self._requests.get()
                if request is _STOP:
                    break
                self._responses.put(self._handle(request))
        except Exception as exc:
            logger.error("Turn-path worker crashed: %s", exc, exc_info=True)
            self._failure = exc

    def _handle(self, request: TurnPathRequest) -> TurnPathResponse:
        error = validate_turn_params(request.params, self.cfg)
        if error is not None:
            return TurnPathResponse(request_id=request.request_id, error=error)
        try:
            path = self._compute(request.params, self.cfg)
        except ValueError as e:
            # compute_turn_path reports unflyable params this way
            return TurnPathResponse(request_id=request.request_id, error=str(e))
        return TurnPathResponse(request_id=request.request_id, path=path)

    # -------------------------------
    # caller side
    # -------------------------------

    @property
    def latest_id(self) -> int:
        with self._lock:
            return self._latest_id

    def _check_alive(self) -> None:
        if self._closed:
            raise WorkerClosed("Turn-path worker is closed")
        if self._failure is not None or not self._thread.is_alive():
            raise WorkerCrashed("Turn-path worker is no longer running") from self._failure

    def submit(self, params: TurnParams) -> int:
        """Queue params; returns the request id that supersedes all earlier ones."""
        self._check_alive()
        with self._lock:
            request_id = next(self._ids)
            try:
                self._requests.put_nowait(TurnPathRequest(request_id, params))
            except queue.Full:
                raise WorkerBusy(
                    f"{self.cfg.worker_max_pending} turn-path requests already pending"
                ) from None
            self._latest_id = request_id
        return request_id

    def _accept(self, response: TurnPathResponse) -> bool:
        latest = self.latest_id
        if response.request_id == latest:
            return True
        logger.debug("Discarding stale turn-path response %d (latest %d)",
                     response.request_id, latest)
        return False

    def latest(self, timeout: Optional[float] = None) -> TurnPathResponse:
        """
        Block until the response to the newest request arrives.

        Raises WorkerTimeout after `timeout` seconds (config default), and
        WorkerCrashed / WorkerClosed if the thread can no longer answer.
        """
        if self.latest_id == 0:
            raise WorkerError("No turn-path request has been submitted")
        timeout = self.cfg.worker_timeout_s if timeout is None else timeout
        deadline = time.monotonic() + timeout

        while True:
            remaining = deadline - time.monotonic()
            try:
                response = self._responses.get(timeout=max(0.0, min(remaining, _POLL_SLICE_S)))
            except queue.Empty:
                self._check_alive()
                if remaining <= 0:
                    raise WorkerTimeout(
                        f"No response for turn-path request {self.latest_id} "
                        f"within {timeout:g}s"
                    ) from None
                continue
            if self._accept(response):
                return response

    def poll(self) -> Optional[TurnPathResponse]:
        """Non-blocking: the newest request's response if ready, else None."""
        found: Optional[TurnPathResponse] = None
        while True:
            try:
                response = self._responses.get_nowait()
            except queue.Empty:
                break
            if self._accept(response):
                found = response
        if found is None:
            self._check_alive()
        return found

    def close(self, timeout: Optional[float] = None) -> None:
        if self._closed:
            return
        self._closed = True
        timeout = self.cfg.worker_timeout_s if timeout is None else timeout
        if self._thread.is_alive():
            try:
                self._requests.put(_STOP, timeout=timeout)
            except queue.Full:
                logger.warning("Turn-path worker did not accept stop request")
                return
            self._thread.join(timeout)

    def __enter__(self) -> "TurnPathWorker":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
