"""Tests for verbump.logging_utils: setup and throttled failure logging."""
import logging
from logging.handlers import RotatingFileHandler

from verbump.logging_utils import configure_logging, get_suppressed_snapshot, log_suppressed


class TestLogSuppressed:
    def test_samples_then_throttles(self, caplog):
        logger = logging.getLogger('verbump.test')
        caplog.set_level(logging.WARNING, logger='verbump.test')
        for _ in range(5):
            log_suppressed(logger, ValueError('boom'), 'save FORMAT_ERROR', sample=2, cooldown=3600)
        records = [r for r in caplog.records if r.name == 'verbump.test']
        assert len(records) == 2
        assert 'save FORMAT_ERROR err=boom' in records[0].getMessage()

    def test_counts_every_call(self):
        logger = logging.getLogger('verbump.test')
        for _ in range(3):
            count = log_suppressed(logger, ValueError('x'), 'open FILE_ACCESS_ERROR', sample=1, cooldown=3600)
        assert count == 3
        snapshot = get_suppressed_snapshot()
        key = f'verbump.test:open FILE_ACCESS_ERROR:{logging.WARNING}'
        assert snapshot[key]['count'] == 3

    def test_contexts_are_independent(self, caplog):
        logger = logging.getLogger('verbump.test')
        caplog.set_level(logging.WARNING, logger='verbump.test')
        log_suppressed(logger, ValueError('a'), 'first', sample=1, cooldown=3600)
        log_suppressed(logger, ValueError('b'), 'second', sample=1, cooldown=3600)
        assert len([r for r in caplog.records if r.name == 'verbump.test']) == 2


class TestConfigureLogging:
    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv('VERBUMP_LOG_LEVEL', 'debug')
        monkeypatch.delenv('VERBUMP_LOG_FILE', raising=False)
        assert configure_logging() == logging.DEBUG
        assert logging.getLogger('verbump').level == logging.DEBUG

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv('VERBUMP_LOG_LEVEL', 'debug')
        monkeypatch.delenv('VERBUMP_LOG_FILE', raising=False)
        assert configure_logging('warning') == logging.WARNING

    def test_rotating_file_handler(self, monkeypatch, tmp_path):
        log_file = tmp_path / 'verbump.log'
        monkeypatch.setenv('VERBUMP_LOG_FILE', str(log_file))
        monkeypatch.setenv('VERBUMP_LOG_MAX_BYTES', '1024')
        root = logging.getLogger()
        before = list(root.handlers)
        try:
            configure_logging('info')
            added = [h for h in root.handlers if h not in before and isinstance(h, RotatingFileHandler)]
            assert len(added) == 1
            assert added[0].maxBytes == 1024
            logging.getLogger('verbump.test').info('hello file')
            added[0].flush()
            assert 'hello file' in log_file.read_text()
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
                    handler.close()
