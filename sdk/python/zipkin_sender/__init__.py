"""
Zipkin sender - delivers serialized spans to a Zipkin collector

Example usage:
    from zipkin_sender import prepare_send

    send = await prepare_send(
        "http://localhost:9411/api/v2/spans",
        headers={"Authorization": lambda: f"Bearer {get_token()}"},
    )
    await send(spans, lambda result: print(result.code))

    # Or let the exporter manage the sender
    from zipkin_sender import ZipkinExporter

    exporter = ZipkinExporter()
    await exporter.export(spans, on_result)
    await exporter.shutdown()
"""

from zipkin_sender.sender import SendFn, prepare_send, serialize_spans
from zipkin_sender.exporter import ZipkinExporter
from zipkin_sender.result import DoneCallback, ExportResult, ExportResultCode
from zipkin_sender.headers import (
    DEFAULT_HEADERS,
    ComputedHeader,
    HeaderValue,
    LiteralHeader,
    build_request_headers,
    resolve_headers,
)
from zipkin_sender.context import BeaconContext, get_beacon, set_beacon
from zipkin_sender.config import SenderConfig
from zipkin_sender.errors import (
    BeaconRejectedError,
    UnexpectedStatusError,
    ZipkinRequestError,
    ZipkinSenderError,
    get_global_error_handler,
    set_global_error_handler,
)
from zipkin_sender.transport import (
    BeaconQueue,
    BeaconTransport,
    HttpRequestTransport,
    TransportKind,
    TransportStrategy,
)

__version__ = "0.1.0"

__all__ = [
    # Sending
    "SendFn",
    "prepare_send",
    "serialize_spans",
    "ZipkinExporter",
    # Results
    "DoneCallback",
    "ExportResult",
    "ExportResultCode",
    # Headers
    "DEFAULT_HEADERS",
    "ComputedHeader",
    "HeaderValue",
    "LiteralHeader",
    "build_request_headers",
    "resolve_headers",
    # Runtime capabilities
    "BeaconContext",
    "get_beacon",
    "set_beacon",
    # Configuration
    "SenderConfig",
    # Errors
    "BeaconRejectedError",
    "UnexpectedStatusError",
    "ZipkinRequestError",
    "ZipkinSenderError",
    "get_global_error_handler",
    "set_global_error_handler",
    # Transports
    "BeaconQueue",
    "BeaconTransport",
    "HttpRequestTransport",
    "TransportKind",
    "TransportStrategy",
]
