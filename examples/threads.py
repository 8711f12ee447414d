"""
Create spans on several worker threads through the global tracer.

Every worker continues the trace of a root span whose context is passed
through HTTP headers, as it would be between two services. A single
reporter thread writes all finished spans to stderr.

Usage:
  python examples/threads.py --workers 5
"""

import argparse
import logging
import sys
import threading
import time
from typing import Dict

from opentracing_api import GlobalTracer, ReporterConfig, ReporterThread, StartOptions, failing_span
from opentracing_api.tracers import FileTracer

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(threadName)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def work(index: int, headers: Dict[str, str], delay: float, fail_every: int) -> None:
    tracer = GlobalTracer.get()
    parent = tracer.extract_http_headers(headers)
    options = StartOptions().child_of(parent) if parent is not None else None

    span = tracer.span("thread", options)
    span.tag("index", index)
    try:
        with span.auto_finish(), failing_span(span):
            time.sleep(delay * index)
            if fail_every and index % fail_every == 0:
                raise RuntimeError(f"worker {index} gave up")
    except RuntimeError as e:
        logger.warning(f"Worker {index} failed: {e}")
        return
    logger.info(f"Worker {index} done")


def main():
    parser = argparse.ArgumentParser(description="Report spans created on worker threads.")
    parser.add_argument("--workers", type=int, default=9, help="Number of worker threads")
    parser.add_argument("--delay", type=float, default=0.2, help="Seconds each worker sleeps per index")
    parser.add_argument("--fail-every", type=int, default=4, help="Fail every Nth worker, 0 to never fail")
    args = parser.parse_args()

    tracer, receiver = FileTracer.new()
    GlobalTracer.init(tracer)
    config = ReporterConfig.from_env()

    with ReporterThread(receiver, lambda span: FileTracer.write_trace(span, sys.stderr), config=config):
        root = GlobalTracer.get().span("main")
        root.set_baggage_item("run", "threads-example")
        headers: Dict[str, str] = {}
        GlobalTracer.get().inject_http_headers(root.context, headers)

        threads = [
            threading.Thread(
                target=work,
                args=(i, headers, args.delay, args.fail_every),
                name=f"Thread#{i}",
            )
            for i in range(1, args.workers + 1)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        root.finish()
        logger.info(f"All {args.workers} workers finished, flushing spans")


if __name__ == "__main__":
    main()
