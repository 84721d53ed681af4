"""
Tests for error reporting and aggregation.
"""

import logging
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tincconf.config.errors import ConfigSyntaxError
from tincconf.utils.error_handling import (
    ErrorAggregator,
    ErrorCategory,
    ErrorSeverity,
    get_error_aggregator,
    handle_error,
)


class TestHandleError:

    def test_logs_message_and_context(self, caplog):
        error = ConfigSyntaxError("No value for variable `Port'", variable="Port", line=2)
        context = handle_error(error, "read_config_file", ErrorCategory.CONFIG,
                               additional_context={'line': 2})

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.getMessage() == "No value for variable `Port'"
        assert record.extra_data == {'line': 2}
        assert context.to_dict()['error_type'] == 'ConfigSyntaxError'

    def test_severity_sets_level(self, caplog):
        handle_error(ValueError("odd"), "op", severity=ErrorSeverity.WARNING)
        assert caplog.records[-1].levelno == logging.WARNING

    def test_reraise(self):
        with pytest.raises(ValueError):
            handle_error(ValueError("bad"), "op", reraise=True)
        assert len(get_error_aggregator()) == 1

    def test_custom_logger(self, caplog):
        handle_error(ValueError("routed"), "op", log=logging.getLogger("tincconf.keys"))
        assert caplog.records[-1].name == "tincconf.keys"


class TestErrorAggregator:

    def test_summary(self):
        handle_error(ValueError("a"), "op", ErrorCategory.CONFIG)
        handle_error(ValueError("b"), "op", ErrorCategory.CONFIG, ErrorSeverity.WARNING)
        handle_error(OSError("c"), "op", ErrorCategory.FILESYSTEM)

        summary = get_error_aggregator().get_error_summary()
        assert summary['total_errors'] == 3
        assert summary['by_category'] == {'configuration': 2, 'filesystem': 1}
        assert summary['by_severity'] == {'error': 2, 'warning': 1}

    def test_recent_errors(self):
        for i in range(5):
            handle_error(ValueError(str(i)), "op")
        recent = get_error_aggregator().get_recent_errors(2)
        assert [e['error_message'] for e in recent] == ['3', '4']

    def test_bounded(self):
        aggregator = ErrorAggregator(max_errors=3)
        for i in range(5):
            aggregator.add_error(handle_error(ValueError(str(i)), "op"))
        assert len(aggregator) == 3
        assert aggregator.get_recent_errors(1)[0]['error_message'] == '4'

    def test_clear(self):
        handle_error(ValueError("x"), "op")
        get_error_aggregator().clear()
        assert len(get_error_aggregator()) == 0
