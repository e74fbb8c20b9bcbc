import logging
import time
from typing import Callable

from fastapi import APIRouter, Request, Response
from fastapi.routing import APIRoute

from prompty.constants.metrics import Constants
from prompty.metrics.statsd_client import statsd

logger = logging.getLogger("api")


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # First hop is the original client
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class MetricsAPIRoute(APIRoute):
    """Route that logs every call and records latency and count per templated path."""

    def get_route_handler(self) -> Callable:
        handler = super().get_route_handler()
        route_path = self.path

        async def timed_handler(request: Request) -> Response:
            method = request.method
            ip = client_ip(request)
            start = time.perf_counter()
            logger.info(f"Request | {method} | {request.url.path} | {ip}")

            try:
                response = await handler(request)
            except Exception as e:
                status_code = getattr(e, "status_code", 500)
                took = elapsed_ms(start)
                if status_code >= 500:
                    logger.error(
                        f"Request failed | {method} | {request.url.path} | {ip} | {e} | {took:.2f}ms",
                        exc_info=True,
                    )
                else:
                    logger.info(
                        f"Response | {method} | {request.url.path} | {ip} | {status_code} | {took:.2f}ms"
                    )
                record_request(method, route_path, status_code, took)
                raise

            took = elapsed_ms(start)
            logger.info(
                f"Response | {method} | {request.url.path} | {ip} | {response.status_code} | {took:.2f}ms"
            )
            record_request(method, route_path, response.status_code, took)
            return response

        return timed_handler


def record_request(method: str, path: str, status_code: int, took_ms: float):
    tags = {
        Constants.Tag.METHOD: method,
        Constants.Tag.PATH: path,
        Constants.Tag.CODE: status_code,
    }
    statsd.timing(Constants.Metric.API_LATENCY, took_ms, Constants.Metric.HUNDRED_SAMPLING_RATE, tags)
    statsd.increment(
        Constants.Metric.API_COUNT,
        Constants.Metric.INCREMENT_COUNT,
        Constants.Metric.HUNDRED_SAMPLING_RATE,
        tags,
    )


class MetricsRouter(APIRouter):
    def __init__(self, *args, **kwargs):
        kwargs["route_class"] = MetricsAPIRoute
        super().__init__(*args, **kwargs)
