"""
Error classifier.

Answers, for any error raised by a provider call, whether it means "not
found", "already exists", "transient" or nothing recoverable. Rules are
driven entirely by an immutable ``ErrorClassificationConfig`` so each API
family can be supported without changing callers.
"""

import re
from collections.abc import Iterable
from typing import Optional

from resilient_provisioning.config.schemas import ErrorClassificationConfig
from resilient_provisioning.domain.errors import ErrorKind, OperationError
from resilient_provisioning.infrastructure.resilience.translation import translate_error


class ErrorClassifier:
    """
    Pure classification of errors against static tables.

    Rules are evaluated in order, first match wins: NotFound, AlreadyExists,
    Transient, otherwise Fatal. Explicit kinds set on the wrap chain (for
    example by the translation boundary) take precedence over the rules.
    """

    def __init__(
        self,
        config: ErrorClassificationConfig,
        match_server_error_message: bool = True,
    ) -> None:
        """
        Args:
            config: Classification tables
            match_server_error_message: Whether a ``code: 5xx`` prefix in the
                message counts as transient. Some call sites disable it because
                the provider reuses that text for permanent failures.
        """
        self.config = config
        self.match_server_error_message = match_server_error_message
        self._not_found_phrases = tuple(p.lower() for p in config.not_found_phrases)
        self._already_exists_patterns = tuple(p.lower() for p in config.already_exists_patterns)
        self._transient_codes = frozenset(config.transient_codes)
        self._transient_code_patterns = tuple(re.compile(p) for p in config.transient_code_patterns)
        self._transient_message_patterns = tuple(
            re.compile(p) for p in config.transient_message_patterns
        )
        self._server_error_pattern = (
            re.compile(config.server_error_message_pattern)
            if config.server_error_message_pattern
            else None
        )

    def without_server_error_message_match(self) -> "ErrorClassifier":
        """Return a classifier that ignores ``code: 5xx`` message prefixes."""
        return ErrorClassifier(self.config, match_server_error_message=False)

    # Public API

    def classify(
        self, error: BaseException, extra_transient_codes: Iterable[str] = ()
    ) -> ErrorKind:
        """
        Classify ``error``.

        Args:
            error: Any error; raw SDK errors are translated first
            extra_transient_codes: Call-site specific codes merged with the
                global transient list for this classification only

        Returns:
            The error kind; never ``UNCLASSIFIED``
        """
        node = translate_error(error)

        for link in node.chain():
            if isinstance(link, OperationError) and link.is_classified:
                return link.kind

        innermost = self._innermost(node)
        if innermost.is_classified:
            return innermost.kind
        if self._matches_not_found(innermost):
            return ErrorKind.NOT_FOUND
        if self._matches_already_exists(innermost):
            return ErrorKind.ALREADY_EXISTS
        if self._matches_transient(innermost, frozenset(extra_transient_codes)):
            return ErrorKind.TRANSIENT
        return ErrorKind.FATAL

    def resolve(
        self, error: BaseException, extra_transient_codes: Iterable[str] = ()
    ) -> OperationError:
        """
        Return ``error`` as an ``OperationError`` whose ``kind`` is set.

        ``error`` itself is never modified; an unclassified node is copied
        with its kind set.
        """
        node = translate_error(error)
        if node.is_classified:
            return node
        return node.with_kind(self.classify(node, extra_transient_codes))

    def is_not_found(self, error: Optional[BaseException]) -> bool:
        return error is not None and self.classify(error) is ErrorKind.NOT_FOUND

    def is_already_exists(self, error: Optional[BaseException]) -> bool:
        return error is not None and self.classify(error) is ErrorKind.ALREADY_EXISTS

    def is_transient(
        self, error: Optional[BaseException], extra_transient_codes: Iterable[str] = ()
    ) -> bool:
        return (
            error is not None
            and self.classify(error, extra_transient_codes) is ErrorKind.TRANSIENT
        )

    def is_expected_error(self, error: Optional[BaseException], codes: Iterable[str]) -> bool:
        """
        Check an error against call-site specific codes.

        Matches when the provider code equals one of ``codes``, when one of
        ``codes`` starts with the provider code, or when a code appears in the
        message. Not-found and throttling codes also match their classified
        kind.
        """
        if error is None:
            return False
        codes = tuple(codes)
        if not codes:
            return False

        node = self._innermost(translate_error(error))
        kind = self.classify(error)
        for code in codes:
            if kind is ErrorKind.NOT_FOUND and code in self.config.not_found_codes:
                return True
            if kind is ErrorKind.TRANSIENT and code in self._transient_codes:
                return True
            if node.provider_code and (
                node.provider_code == code or code.startswith(node.provider_code)
            ):
                return True
            if node.message and code in node.message:
                return True
        return False

    # Rules

    @staticmethod
    def _innermost(node: OperationError) -> OperationError:
        """Innermost classifiable node; a raw root cause is translated."""
        innermost = node
        for link in node.chain():
            if isinstance(link, OperationError):
                innermost = link
        cause = innermost.cause
        if (
            cause is not None
            and not isinstance(cause, OperationError)
            and innermost.provider_code is None
            and innermost.http_status is None
        ):
            return translate_error(cause)
        return innermost

    def _matches_not_found(self, node: OperationError) -> bool:
        code = node.provider_code or ""
        if code and code in self.config.not_found_codes:
            return True
        if code and code in self.config.forbidden_not_found_codes:
            return True
        if code and any(code.startswith(prefix) for prefix in self.config.not_found_code_prefixes):
            return True
        if node.http_status == 404:
            return True
        message = (node.message or "").lower()
        return any(phrase in message for phrase in self._not_found_phrases)

    def _matches_already_exists(self, node: OperationError) -> bool:
        if node.http_status == 409:
            return True
        code = (node.provider_code or "").lower()
        message = (node.message or "").lower()
        return any(
            pattern in code or pattern in message for pattern in self._already_exists_patterns
        )

    def _matches_transient(self, node: OperationError, extra_codes: frozenset) -> bool:
        code = node.provider_code or ""
        message = node.message or ""

        if any(fragment in message for fragment in self.config.non_transient_message_patterns):
            return False
        if code and (code in self._transient_codes or code in extra_codes):
            return True
        if any(pattern.search(message) for pattern in self._transient_message_patterns):
            return True
        if (
            self.config.retry_on_server_error
            and node.http_status is not None
            and 500 <= node.http_status <= 599
        ):
            return True
        if code and any(pattern.search(code) for pattern in self._transient_code_patterns):
            return True
        if (
            self.match_server_error_message
            and self._server_error_pattern is not None
            and self._server_error_pattern.search(message)
        ):
            return True
        return False
