"""Builds the resilience layer from configuration."""

import time
from dataclasses import dataclass
from typing import Optional, TypeVar

import boto3

from resilient_provisioning.config import AppConfig, load_config
from resilient_provisioning.domain.base.ports import LoggingPort
from resilient_provisioning.domain.resilience import Clock
from resilient_provisioning.infrastructure.adapters import LoggingAdapter
from resilient_provisioning.infrastructure.diagnostics import DebugSink
from resilient_provisioning.infrastructure.logging import setup_logging
from resilient_provisioning.infrastructure.resilience import (
    ErrorClassifier,
    RetryExecutor,
    StatePoller,
)
from resilient_provisioning.infrastructure.resilience.backoff import Sleep
from resilient_provisioning.providers.aws import classification_for
from resilient_provisioning.providers.aws.infrastructure import AWSClient
from resilient_provisioning.providers.aws.infrastructure.handlers import ResourceHandler

H = TypeVar("H", bound=ResourceHandler)


@dataclass
class ResilienceLayer:
    """Components shared by every operation of a provisioning plugin."""

    config: AppConfig
    classifier: ErrorClassifier
    retry_executor: RetryExecutor
    poller: StatePoller
    logger: LoggingPort
    debug_sink: DebugSink
    clock: Clock
    aws_client: Optional[AWSClient] = None

    def handler(self, handler_class: type[H]) -> H:
        """Create a resource handler wired to this layer."""
        if self.aws_client is None:
            raise ValueError(f"{handler_class.__name__} needs the aws provider to be configured")
        return handler_class(
            self.aws_client,
            self.classifier,
            self.retry_executor,
            self.poller,
            self.logger,
            timeouts=self.config.timeouts,
            clock=self.clock,
        )


def build_resilience_layer(
    config: Optional[AppConfig] = None,
    sleep: Sleep = time.sleep,
    clock: Clock = time.monotonic,
    configure_logging: bool = True,
    session: Optional[boto3.Session] = None,
) -> ResilienceLayer:
    """
    Build classifier, retry executor, poller and transport from ``config``.

    Args:
        config: Application configuration; loaded from file and environment
            when omitted
        sleep: Sleep function shared by backoff and polling
        clock: Monotonic clock shared by all deadlines
        configure_logging: Install the package log handlers
        session: boto3 session for the aws provider

    Returns:
        The assembled layer
    """
    config = config or load_config()
    if configure_logging:
        setup_logging(config.logging)

    logger = LoggingAdapter("resilience")
    classifier = ErrorClassifier(classification_for(config.provider, config.classification))
    retry_executor = RetryExecutor(
        classifier,
        logger.bind(component="retry"),
        retry_config=config.retry,
        default_timeout=config.timeouts.read,
        sleep=sleep,
        clock=clock,
    )
    poller = StatePoller(
        classifier,
        logger.bind(component="poller"),
        polling_config=config.polling,
        default_timeout=config.timeouts.create,
        sleep=sleep,
        clock=clock,
    )
    debug_sink = DebugSink(LoggingAdapter("transport"))

    aws_client = None
    if config.provider == "aws":
        aws_client = AWSClient(config.aws, logger, debug_sink=debug_sink, session=session)

    logger.debug("Resilience layer built for provider %s", config.provider)
    return ResilienceLayer(
        config=config,
        classifier=classifier,
        retry_executor=retry_executor,
        poller=poller,
        logger=logger,
        debug_sink=debug_sink,
        clock=clock,
        aws_client=aws_client,
    )
