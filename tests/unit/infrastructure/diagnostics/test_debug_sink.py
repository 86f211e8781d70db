"""Unit tests for DebugSink."""

import pytest

from resilient_provisioning.infrastructure.diagnostics import DebugSink


@pytest.mark.unit
class TestDebugSink:
    """Test cases for DebugSink."""

    def test_records_response(self, logger):
        sink = DebugSink(logger)

        sink.record("ec2.DescribeInstances", request={"InstanceIds": ["i-1"]}, response={"A": 1})

        logger.debug.assert_called_once()
        args = logger.debug.call_args.args
        assert args[1] == "ec2.DescribeInstances"
        assert '"A": 1' in args[2]
        assert "attempt" not in args[0]

    def test_records_error(self, logger):
        sink = DebugSink(logger)

        sink.record("ec2.RunInstances", request={}, error=RuntimeError("boom"))

        message, action, error = logger.debug.call_args.args[:3]
        assert message.startswith("%s failed: %s")
        assert action == "ec2.RunInstances"
        assert str(error) == "boom"

    def test_secrets_are_redacted(self, logger):
        sink = DebugSink(logger)

        sink.record("sts.AssumeRole", request={"Credentials": {"SessionToken": "abc", "Id": 1}})

        rendered = logger.debug.call_args.args[-1]
        assert "abc" not in rendered
        assert "***" in rendered

    def test_disabled_sink_is_silent(self, logger):
        DebugSink(logger, enabled=False).record("x", request={})

        logger.debug.assert_not_called()

    def test_logging_failures_never_propagate(self, logger):
        logger.debug.side_effect = RuntimeError("handler broken")
        sink = DebugSink(logger)

        sink.record("ec2.DescribeInstances", request={})

        logger.warning.assert_called_once()

    def test_unserializable_payloads_are_rendered(self, logger):
        sink = DebugSink(logger)

        sink.record("x", response={"When": object()})

        logger.debug.assert_called_once()
