"""Background execution of bundle builds.

Record lists are shipped to a worker as plain dicts inside a
:class:`TaskMessage`; the worker answers with a :class:`TaskResponse`
carrying either the bundle or an error message.  ``TaskRunner`` keeps track
of the latest submission per bundle kind so a result computed for stale
input is reported as ``superseded`` instead of being handed to the caller.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import CancelledError, Executor, Future, ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Tuple

from pydantic import ValidationError

from ..api.schemas import TaskMessage, TaskResponse
from ..config import get_settings
from ..core.records import TournamentRecord
from ..stats.facade import build_bundle

logger = logging.getLogger(__name__)


class TaskError(RuntimeError):
    """Raised when a task response does not carry a usable result."""


@dataclass(frozen=True)
class TaskTicket:
    kind: str
    generation: int


def handle_message(message: TaskMessage | Mapping[str, Any]) -> TaskResponse:
    """Build the requested bundle; errors are returned, never raised."""

    if not isinstance(message, TaskMessage):
        try:
            message = TaskMessage.model_validate(message)
        except ValidationError as exc:
            kind = message.get("kind", "") if isinstance(message, Mapping) else ""
            return TaskResponse(kind=str(kind), status="failed", error=f"Invalid task message: {exc}")
    try:
        bundle = build_bundle(message.kind, message.payload)
    except Exception as exc:  # errors cross the task boundary as data
        logger.exception("Task %s failed", message.kind)
        return TaskResponse(kind=message.kind, status="failed", error=str(exc) or type(exc).__name__)
    return TaskResponse(kind=message.kind, status="completed", result=bundle.to_dict())


def _serialise_payload(records: Iterable[TournamentRecord | Mapping[str, Any]]) -> list[Dict[str, Any]]:
    return [r.to_dict() if isinstance(r, TournamentRecord) else dict(r) for r in records]


def unwrap(response: TaskResponse) -> Dict[str, Any]:
    """Return the bundle of a completed response or raise :class:`TaskError`."""

    if response.status == "completed" and response.result is not None:
        return response.result
    if response.status == "superseded":
        raise TaskError(f"{response.kind} task was superseded by a newer submission")
    raise TaskError(response.error or f"{response.kind} task failed")


def run_inline(kind: str, records: Iterable[TournamentRecord | Mapping[str, Any]]) -> Dict[str, Any]:
    """Run a task in the calling thread through the same message boundary."""

    message = TaskMessage(kind=kind, payload=_serialise_payload(records))
    return unwrap(handle_message(message))


class TaskRunner:
    """Submit bundle builds to an executor, newest submission per kind wins."""

    def __init__(self, executor: Executor | None = None, max_workers: int | None = None) -> None:
        self._executor = executor
        self._owns_executor = executor is None
        self._max_workers = max_workers
        self._lock = threading.Lock()
        self._generations: Dict[str, int] = {}
        self._futures: Dict[TaskTicket, Future] = {}
        # last collected response per kind, for repeated waits on the current ticket
        self._collected: Dict[str, Tuple[TaskTicket, TaskResponse]] = {}

    def _get_executor(self) -> Executor:
        if self._executor is None:
            workers = self._max_workers or get_settings().task_workers
            self._executor = ProcessPoolExecutor(max_workers=workers)
        return self._executor

    def submit(self, kind: str, records: Iterable[TournamentRecord | Mapping[str, Any]]) -> TaskTicket:
        message = TaskMessage(kind=kind, payload=_serialise_payload(records))
        with self._lock:
            generation = self._generations.get(kind, 0) + 1
            self._generations[kind] = generation
            for ticket in [t for t in self._futures if t.kind == kind]:
                self._futures.pop(ticket).cancel()
            self._collected.pop(kind, None)
            ticket = TaskTicket(kind=kind, generation=generation)
            self._futures[ticket] = self._get_executor().submit(handle_message, message)
        logger.debug("Submitted %s task #%d with %d records", kind, generation, len(message.payload))
        return ticket

    def is_current(self, ticket: TaskTicket) -> bool:
        with self._lock:
            return self._generations.get(ticket.kind) == ticket.generation

    def wait(self, ticket: TaskTicket, timeout: float | None = None) -> TaskResponse:
        """Block until ``ticket`` finishes and return its response.

        ``concurrent.futures.TimeoutError`` propagates when ``timeout``
        expires; the task keeps running and can be waited on again.
        """

        superseded = TaskResponse(kind=ticket.kind, status="superseded")
        with self._lock:
            future = self._futures.get(ticket)
            latest = self._generations.get(ticket.kind, 0)
            collected = self._collected.get(ticket.kind)
        if future is None:
            if collected is not None and collected[0] == ticket:
                return collected[1]
            if 0 < ticket.generation < latest:
                return superseded
            raise KeyError(f"Unknown task ticket: {ticket}")
        try:
            response = future.result(timeout=timeout)
        except CancelledError:
            return superseded
        except Exception as exc:  # executor-level failure, e.g. a broken process pool
            logger.error("Task %s #%d crashed: %s", ticket.kind, ticket.generation, exc)
            response = TaskResponse(kind=ticket.kind, status="failed", error=str(exc) or type(exc).__name__)
        with self._lock:
            self._futures.pop(ticket, None)
            current = self._generations.get(ticket.kind) == ticket.generation
            if current:
                self._collected[ticket.kind] = (ticket, response)
        if not current:
            logger.debug("Dropping stale %s result #%d", ticket.kind, ticket.generation)
            return superseded
        return response

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __enter__(self) -> "TaskRunner":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()


__all__ = ["TaskError", "TaskRunner", "TaskTicket", "handle_message", "run_inline", "unwrap"]
