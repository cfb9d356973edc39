from .cors import CORSMiddleware, parse_origins
from .logging import LoggingMiddleware
from .prometheus import PrometheusMiddleware
from .request_id import RequestIdMiddleware

__all__ = [
    "CORSMiddleware",
    "LoggingMiddleware",
    "PrometheusMiddleware",
    "RequestIdMiddleware",
    "parse_origins",
]
