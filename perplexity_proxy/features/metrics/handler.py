from fastapi.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

class MetricsHandler:
    """Serves the proxy's Prometheus metrics."""

    def get_raw_metrics(self) -> Response:
        """Returns raw metrics in Prometheus format."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )
