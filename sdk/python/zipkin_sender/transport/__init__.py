"""
Transport layer for the Zipkin sender.
"""

from zipkin_sender.transport.base import TransportKind, TransportStrategy
from zipkin_sender.transport.beacon import Beacon, BeaconQueue, BeaconTransport
from zipkin_sender.transport.http import HttpRequestTransport

__all__ = [
    "TransportKind",
    "TransportStrategy",
    "Beacon",
    "BeaconQueue",
    "BeaconTransport",
    "HttpRequestTransport",
]
