"""Server-Sent Events relay for pipeline runs.

Each run executes on a bounded ThreadPoolExecutor; its progress callback
pushes into a per-request queue that the response generator drains into
``data: <JSON>`` frames. A client that disconnects only closes the
generator: the run keeps going with nobody listening.
"""

import json
import logging
import queue
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator

from vid2blog.core.pipeline import PipelineResult, ProgressCallback
from vid2blog.models.schemas import ProcessingStatus

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

RunFn = Callable[[ProgressCallback], PipelineResult]


def format_event(payload: dict) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def progress_event(status: ProcessingStatus) -> str:
    return format_event({"type": "progress", "status": status.to_wire()})


def result_event(result: PipelineResult) -> str:
    return format_event({"type": "result", "result": result.to_dict()})


def error_event(message: str) -> str:
    return format_event({"type": "error", "error": message})


class StreamRunner:

    def __init__(self, max_workers: int = 4):
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="vid2blog-run",
        )

    def stream(self, run: RunFn) -> Iterator[str]:
        """Start ``run`` in the pool and return an iterator of SSE frames.

        The iterator ends after exactly one terminal frame: ``result`` when
        the run returns, ``error`` when it raises.
        """
        events: queue.Queue = queue.Queue()

        def work() -> None:
            try:
                result = run(lambda status: events.put(("progress", status)))
            except Exception as e:
                logger.exception("Streaming run failed")
                events.put(("error", str(e) or "Processing failed"))
            else:
                events.put(("result", result))

        self._executor.submit(work)
        return self._drain(events)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)

    @staticmethod
    def _drain(events: queue.Queue) -> Iterator[str]:
        while True:
            kind, payload = events.get()
            if kind == "progress":
                yield progress_event(payload)
            elif kind == "result":
                yield result_event(payload)
                return
            else:
                yield error_event(payload)
                return
