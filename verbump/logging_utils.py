import logging
import os
import threading
import time
from typing import Dict, Optional, Tuple

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

_SuppressionKey = Tuple[str, str, int]
_SuppressionState = Dict[str, float | int]

_SUPPRESSION_LOCK = threading.Lock()
_SUPPRESSION_STATE: Dict[_SuppressionKey, _SuppressionState] = {}


def configure_logging(level_name: Optional[str] = None) -> int:
    """Set up root logging from ``VERBUMP_LOG_*`` environment variables.

    Returns the numeric level in effect.
    """
    level_name = (level_name or os.environ.get('VERBUMP_LOG_LEVEL', 'INFO')).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    log = logging.getLogger('verbump')
    log.setLevel(level)
    # Optional rotating file handler for build agents keeping history
    log_file = os.environ.get('VERBUMP_LOG_FILE')
    if log_file:
        from logging.handlers import RotatingFileHandler
        max_bytes = int(os.environ.get('VERBUMP_LOG_MAX_BYTES', str(5 * 1024 * 1024)))
        backup = int(os.environ.get('VERBUMP_LOG_BACKUP_COUNT', '5'))
        try:
            fh = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup)
        except OSError as exc:
            log.warning('failed attaching RotatingFileHandler for %s: %s', log_file, exc)
        else:
            fh.setLevel(level)
            fh.setFormatter(logging.Formatter(LOG_FORMAT))
            logging.getLogger().addHandler(fh)
            log.info('RotatingFileHandler attached path=%s max_bytes=%d backups=%d', log_file, max_bytes, backup)
    log.debug('Logging initialized at level %s', level_name)
    return level


def log_suppressed(
    logger: logging.Logger,
    exc: Exception,
    context: str,
    *,
    level: int = logging.WARNING,
    sample: int = 5,
    cooldown: float = 60.0,
) -> int:
    """Emit a throttled log entry for repeated per-file failures.

    Parameters
    ----------
    logger: logging.Logger
        Target logger to write into.
    exc: Exception
        Exception instance that made the file fail.
    context: str
        Failure site, typically ``'<operation> <error_code>'`` so one noisy
        kind of failure does not hide the others.
    level: int
        Logging level; defaults to ``WARNING``.
    sample: int
        Emit the first ``sample`` occurrences before throttling kicks in.
    cooldown: float
        Minimum seconds between emissions once the sample budget is spent.

    Returns
    -------
    int
        Number of times this ``context`` has been reported, suppressed
        writes included.
    """
    now = time.time()
    key: _SuppressionKey = (logger.name, context, level)
    with _SUPPRESSION_LOCK:
        state = _SUPPRESSION_STATE.setdefault(key, {'count': 0, 'last_emit': 0.0})
        state['count'] = int(state['count']) + 1
        count = int(state['count'])
        last_emit = float(state.get('last_emit', 0.0))
        should_emit = count <= sample or (now - last_emit) >= cooldown
        if should_emit:
            state['last_emit'] = now
    if should_emit:
        logger.log(level, '%s err=%s (suppressed=%d)', context, exc, max(0, count - 1))
    return count


def get_suppressed_snapshot() -> Dict[str, Dict[str, float | int]]:
    """Return a shallow copy of suppression counters."""
    with _SUPPRESSION_LOCK:
        snapshot: Dict[str, Dict[str, float | int]] = {}
        for (logger_name, context, level), state in _SUPPRESSION_STATE.items():
            snapshot[f'{logger_name}:{context}:{level}'] = {
                'count': int(state.get('count', 0)),
                'last_emit': float(state.get('last_emit', 0.0)),
            }
    return snapshot


def reset_suppressed_state() -> None:
    """Clear suppression counters. Useful for unit tests."""
    with _SUPPRESSION_LOCK:
        _SUPPRESSION_STATE.clear()
