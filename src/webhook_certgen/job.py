#!/usr/bin/env python3
"""
Webhook Certgen - process entry point for the one-shot certificate job.

Usage:
    python -m webhook_certgen
    # Or through the console script:
    webhook-certgen

Environment Variables:
    CERTGEN_SECRET_NAME: Name of the webhook TLS secret
    CERTGEN_SECRET_NAMESPACE: Namespace of the webhook TLS secret
    CERTGEN_SERVICE_NAME: Webhook service the certificate is issued for
    CERTGEN_CRD_NAME: CRD whose conversion webhook receives the CA bundle
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
"""

import logging
import sys

from webhook_certgen.observability.logging import setup_structured_logging
from webhook_certgen.services.orchestrator import Orchestrator
from webhook_certgen.settings import settings as job_settings

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure structured logging for the job based on job_settings."""
    setup_structured_logging(
        log_level=job_settings.log_level.upper(),
        enable_json_formatting=job_settings.json_logs,
        correlation_id_enabled=job_settings.correlation_ids,
    )


def main() -> int:
    """Run one reconciliation and translate the outcome into an exit code."""
    configure_logging()

    outcome = Orchestrator(settings=job_settings).reconcile()
    if outcome.success:
        logger.info(
            f"Certificate job finished: {outcome}",
            extra={"outcome": str(outcome.secret_state)},
        )
        return 0

    logger.error(
        f"Certificate job failed: {outcome}",
        extra={"error_type": outcome.error_kind},
    )
    return 1


if __name__ == "__main__":
    sys.exit(main())
