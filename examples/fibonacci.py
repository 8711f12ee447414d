"""
Trace the recursive calls of a Fibonacci computation on a single thread.

Each call becomes a span that is a child of the caller's span, so the
written report shows the whole call tree under one trace ID. Finished spans
are written to stderr by a reporter thread using the FileTracer format.

Usage:
  python examples/fibonacci.py --n 8
  python examples/fibonacci.py --n 5 --output trace.txt
"""

import argparse
import logging
import sys

from opentracing_api import GlobalTracer, Log, ReporterThread, SpanContext, StartOptions, Tracer
from opentracing_api.tracers import FileTracer

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def fibonacci(n: int, tracer: Tracer, parent: SpanContext) -> int:
    options = StartOptions().child_of(parent.clone())
    if n <= 2:
        with tracer.span("fibonacci base case", options).auto_finish() as span:
            span.tag("n", n)
            return 1

    with tracer.span("fibonacci iterative case", options).auto_finish() as span:
        span.tag("n", n)
        n1 = fibonacci(n - 1, tracer, span.context)
        n2 = fibonacci(n - 2, tracer, span.context)
        span.log(Log().log("event", "computed").log("result", n1 + n2))
        return n1 + n2


def main():
    parser = argparse.ArgumentParser(description="Trace a recursive Fibonacci computation.")
    parser.add_argument("--n", type=int, default=8, help="Which Fibonacci number to compute")
    parser.add_argument("--output", help="Write the trace to this file instead of stderr")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    tracer, receiver = FileTracer.new()
    tracer = GlobalTracer.init(tracer)
    out = open(args.output, "w", encoding="utf-8") if args.output else sys.stderr

    try:
        with ReporterThread(receiver, lambda span: FileTracer.write_trace(span, out)):
            with tracer.span("main").auto_finish() as root:
                result = fibonacci(args.n, tracer, root.context)
                root.tag("result", result)
            logger.info(f"fibonacci({args.n}) = {result}")
            logger.info("Waiting for the reporter to flush all spans ...")
    finally:
        if out is not sys.stderr:
            out.close()


if __name__ == "__main__":
    main()
