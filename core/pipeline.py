"""Request → processor → producer plumbing shared by the CLI commands.

A processor turns a request into a ``ResultEnvelope``; it never raises.
A producer renders the envelope. ``run_pipeline`` wires the two and
returns the envelope's exit code.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, Protocol, TypeVar

from .cli_errors import ExitCode, exit_code_for

LOG = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")
ResultT = TypeVar("ResultT")


@dataclass
class ResultEnvelope(Generic[ResultT]):
    status: str
    payload: Optional[ResultT] = None
    diagnostics: Optional[Dict[str, Any]] = None

    def ok(self) -> bool:
        return self.status.lower() == "success"

    def unwrap(self) -> ResultT:
        """Payload, or ValueError carrying the diagnostics message."""
        if self.payload is None:
            raise ValueError((self.diagnostics or {}).get("message", "No payload"))
        return self.payload

    def exit_code(self) -> int:
        if self.ok():
            return int(ExitCode.SUCCESS)
        return int((self.diagnostics or {}).get("code", ExitCode.USAGE))


class Consumer(Protocol[RequestT]):
    def consume(self) -> RequestT:
        ...


class RequestConsumer(Generic[RequestT], Consumer[RequestT]):
    """Hands back the request it was built with."""

    def __init__(self, request: RequestT) -> None:
        self._request = request

    def consume(self) -> RequestT:  # pragma: no cover - trivial
        return self._request


class SafeProcessor(Generic[RequestT, ResultT]):
    """Processor whose exceptions become error envelopes.

    Diagnostics hold ``message``, ``code`` (see exit_code_for) and, when
    the exception has one, ``hint``.
    """

    def process(self, payload: RequestT) -> ResultEnvelope[ResultT]:
        try:
            return ResultEnvelope(status="success", payload=self._process_safe(payload))
        except Exception as exc:
            LOG.debug("%s failed", type(self).__name__, exc_info=True)
            diagnostics: Dict[str, Any] = {"message": str(exc), "code": exit_code_for(exc)}
            hint = getattr(exc, "hint", None)
            if hint:
                diagnostics["hint"] = hint
            return ResultEnvelope(status="error", diagnostics=diagnostics)

    def _process_safe(self, payload: RequestT) -> ResultT:
        raise NotImplementedError("Subclass must implement _process_safe")


class BaseProducer:
    """Prints failures itself and hands successful payloads to _produce_success()."""

    def produce(self, result: ResultEnvelope) -> None:
        if result.ok():
            if result.payload is not None:
                self._produce_success(result.payload, result.diagnostics)
            return
        diag = result.diagnostics or {}
        if diag.get("message"):
            print(diag["message"])
        if diag.get("hint"):
            print(f"Hint: {diag['hint']}")

    def _produce_success(self, payload: Any, diagnostics: Optional[Dict[str, Any]]) -> None:
        raise NotImplementedError("Subclass must implement _produce_success")


def run_pipeline(request: Any, processor: SafeProcessor, producer: BaseProducer) -> int:
    """Process ``request``, render the outcome and return the exit code."""
    envelope = processor.process(RequestConsumer(request).consume())
    producer.produce(envelope)
    return envelope.exit_code()
