"""
FastAPI Service Factory
Builds the SOS FastAPI app with CORS, a health check and Prometheus
request metrics, so route modules only declare their own endpoints.
"""

import time
from typing import List

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


class ServiceMetrics:
    """Request count and latency, kept in a registry private to one service."""

    def __init__(self, service_name: str):
        self.service_name = service_name
        self.registry = CollectorRegistry()
        self.requests = Counter(
            "service_requests_total",
            "Total HTTP requests handled by the service",
            ["service", "method", "path", "http_status"],
            registry=self.registry,
        )
        self.latency = Histogram(
            "service_request_duration_seconds",
            "Request latency in seconds",
            ["service", "path"],
            registry=self.registry,
        )

    def observe(self, request: Request, status_code: int, duration: float) -> None:
        path = request.url.path
        self.requests.labels(self.service_name, request.method, path, status_code).inc()
        self.latency.labels(self.service_name, path).observe(duration)

    def render(self) -> Response:
        return Response(content=generate_latest(self.registry), media_type=CONTENT_TYPE_LATEST)


class ServiceAppConfig:
    """Title, description and metric label for one service app."""

    def __init__(self, title: str, description: str, service_name: str, version: str = "1.0.0"):
        self.title = title
        self.description = description
        self.service_name = service_name
        self.version = version


class FastAPIServiceFactory:
    def __init__(self, config: ServiceAppConfig):
        self.config = config
        self.metrics = ServiceMetrics(config.service_name)

    def create_app(self) -> FastAPI:
        app = FastAPI(
            title=self.config.title,
            description=self.config.description,
            version=self.config.version,
        )
        # the SOS client may be served from any origin
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

        metrics = self.metrics
        service_name = self.config.service_name

        @app.middleware("http")
        async def record_request_metrics(request: Request, call_next):
            start = time.time()
            response = await call_next(request)
            metrics.observe(request, response.status_code, time.time() - start)
            return response

        @app.get("/health")
        async def health_check():
            return {"status": "ok", "service": service_name}

        @app.get("/metrics")
        async def metrics_endpoint():
            """Prometheus metrics endpoint."""
            return metrics.render()

        return app

    def add_business_metric(self, name: str, description: str, labels: List[str] = None) -> Counter:
        """Register a counter in this service's metrics registry."""
        return Counter(name, description, labels or [], registry=self.metrics.registry)
