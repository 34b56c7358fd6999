"""
Structured logging setup for Lambda & local runs.

PURPOSE:
- Configure JSON logs for the proposal engine in AWS Lambda and on the command line.
- Library modules log through structlog.get_logger(__name__); entry points call
  configure_logging() once and get a logger bound with service metadata.

CREDITS:
- Original work — no external code reuse.
"""

from __future__ import annotations
import logging
import os
import sys
import structlog

SERVICE_NAME = "ProposalEngine"


def configure_logging():
    """
    Configure structured JSON logging for the current environment.

    returns:
    - structlog.BoundLogger – logger bound with service and env.

    behaviour:
    - Reads log level from LOG_LEVEL (default = INFO).
    - Writes to stdout so Lambda forwards lines to CloudWatch.
    - Renders JSON with ISO timestamps and formatted exceptions.

    example log entry:
    {
      "event": "allocation.rule_selected",
      "level": "info",
      "timestamp": "2025-10-21T13:00:00Z",
      "service": "ProposalEngine",
      "env": "dev",
      "category": "Moderate",
      "rule": "checkpoint"
    }
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger().bind(service=SERVICE_NAME, env=os.getenv("ENV", "dev"))
