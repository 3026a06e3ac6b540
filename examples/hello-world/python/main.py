"""
Zipkin Sender Hello World Example (Python)

Sends two spans to a local Zipkin collector, first with plain JSON headers
and then with a computed Authorization header.

Prerequisites:
    pip install zipkin-sender
    docker run -d -p 9411:9411 openzipkin/zipkin

Run:
    python main.py
"""

import asyncio
import logging
import os
import time
import uuid

from zipkin_sender import ExportResult, prepare_send


def make_span(trace_id: str, name: str) -> dict:
    now_us = int(time.time() * 1_000_000)
    return {
        "traceId": trace_id,
        "id": uuid.uuid4().hex[:16],
        "name": name,
        "timestamp": now_us,
        "duration": 1500,
        "localEndpoint": {"serviceName": "hello-world"},
    }


def report(result: ExportResult) -> None:
    if result.ok:
        print("  delivered")
    else:
        print(f"  failed: {result.error}")


async def fetch_token() -> str:
    await asyncio.sleep(0.01)  # Simulate a token service
    return "Bearer hello-world"


async def main():
    logging.basicConfig(level=logging.DEBUG)
    url = os.getenv("OTEL_EXPORTER_ZIPKIN_ENDPOINT", "http://localhost:9411/api/v2/spans")

    trace_id = uuid.uuid4().hex
    spans = [make_span(trace_id, "hello"), make_span(trace_id, "world")]

    print("Sending with default headers...")
    send = await prepare_send(url)
    await send(spans, report)

    print("Sending with a computed header...")
    send = await prepare_send(url, {"Authorization": fetch_token})
    await send(spans, report)


if __name__ == "__main__":
    asyncio.run(main())
