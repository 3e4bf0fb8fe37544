"""Custom filters for uvicorn access logging."""

import logging

from pydantic import ValidationError

DEFAULT_EXCLUDED_PATHS = ("/metrics", "/health")


class ExcludeMonitoringPathsFilter(logging.Filter):
    """
    Logging filter to exclude monitoring endpoint requests from access logs.

    Health checks and Prometheus scraping would otherwise flood uvicorn's
    access log. The excluded paths come from LOG_EXCLUDED_PATHS.

    Note: uvicorn may build this filter from its logging config before the
    application is imported, so settings are read lazily.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Determine if the log record should be logged.

        Args:
            record: The log record to evaluate.

        Returns:
            False if the request path is excluded, True otherwise.
        """
        message = record.getMessage()

        try:
            from bruteforce_hub.settings import app_settings

            excluded_paths = app_settings.LOG_EXCLUDED_PATHS
        except ValidationError:
            # Settings need WS_LISTEN_ADDR; fall back when it is missing
            excluded_paths = list(DEFAULT_EXCLUDED_PATHS)

        return not any(path in message for path in excluded_paths)
