"""Resilient Provisioning - resilient-operation layer for cloud provisioning plugins.

Every create/read/update/delete issued by a provisioning plugin goes through
the same three pieces:

Key Components:
    - Error classifier: maps heterogeneous provider errors to a stable taxonomy
    - Retry executor: retries transient failures with incremental backoff
    - State poller: waits for an asynchronous resource to reach a target state

Layout:
    - domain: error taxonomy, retry policy, poll target value objects and ports
    - infrastructure: classifier, retry executor, poller, logging, diagnostics
    - providers: provider transports and resource handler base classes
    - config: configuration schemas and loading

Usage:
    >>> from resilient_provisioning.infrastructure.factories import build_resilience_layer
    >>> layer = build_resilience_layer()
    >>> layer.retry_executor.run(lambda: client.describe_instances(), timeout=300)
"""

from ._package import PACKAGE_NAME, __version__

__package_name__ = PACKAGE_NAME

__all__ = ["PACKAGE_NAME", "__version__"]
