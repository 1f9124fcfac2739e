"""Health check HTTP server for the bot."""
import json
import threading
from http.server import HTTPServer, BaseHTTPRequestHandler
from typing import Callable, Dict, Tuple

from wowbot import logging_client

logger = logging_client.setup_logger('wowbot')


def evaluate_checks(service_name: str, checks: Dict[str, Callable[[], bool]]) -> Tuple[int, dict]:
    """
    Run every registered check.

    Returns:
        (HTTP status code, JSON-serializable body)
    """
    results = {}
    all_healthy = True

    for check_name, check_func in checks.items():
        try:
            is_healthy = bool(check_func())
            results[check_name] = {
                "status": "healthy" if is_healthy else "unhealthy",
                "healthy": is_healthy
            }
        except Exception as e:
            is_healthy = False
            results[check_name] = {
                "status": "error",
                "healthy": False,
                "error": str(e)
            }
        all_healthy = all_healthy and is_healthy

    body = {
        "service": service_name,
        "status": "healthy" if all_healthy else "unhealthy",
        "checks": results
    }
    return (200 if all_healthy else 503), body


class HealthCheckHandler(BaseHTTPRequestHandler):
    """HTTP handler for health checks."""

    # Set by HealthCheckServer.start()
    health_checks: Dict[str, Callable[[], bool]] = {}
    service_name: str = "unknown"

    def do_GET(self):
        if self.path != '/health':
            self.send_response(404)
            self.end_headers()
            return

        status_code, body = evaluate_checks(self.service_name, self.health_checks)
        self.send_response(status_code)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(body).encode())

    def log_message(self, format, *args):
        pass  # Suppress HTTP logs


class HealthCheckServer:
    """Serves GET /health from a daemon thread."""

    def __init__(self, service_name: str, port: int = 9998):
        self.service_name = service_name
        self.port = port
        self.health_checks: Dict[str, Callable[[], bool]] = {}
        self.server = None
        self.thread = None

    def register_check(self, name: str, check_func: Callable[[], bool]):
        """Register a health check function.

        Args:
            name: Name of the check (e.g., "discord")
            check_func: Function that returns True if healthy, False otherwise
        """
        self.health_checks[name] = check_func

    def start(self):
        """Start the health check HTTP server."""
        HealthCheckHandler.health_checks = self.health_checks
        HealthCheckHandler.service_name = self.service_name

        self.server = HTTPServer(('0.0.0.0', self.port), HealthCheckHandler)
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.thread.start()
        logger.info(f"✅ Health check server started for {self.service_name} on port {self.port}")

    def stop(self):
        """Stop the health check server."""
        if self.server:
            self.server.shutdown()
            self.server.server_close()
