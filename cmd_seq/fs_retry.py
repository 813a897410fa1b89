"""Unlink helpers that tolerate transient file locks."""

from __future__ import annotations

import dataclasses as dc
import logging
import time
import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from pathlib import Path

_logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class RetryConfig:
    """
    Bounded retry policy for file removal.

    Attributes
    ----------
    max_attempts : int
        Number of unlink attempts before giving up (must be >= 1).
    retry_delay : float
        Seconds to sleep between attempts (must be >= 0).

    Raises
    ------
    ValueError
        If max_attempts < 1 or retry_delay < 0.
    """

    max_attempts: int
    retry_delay: float

    def __post_init__(self) -> None:
        """Validate retry configuration values."""
        if self.max_attempts < 1:
            msg = "max_attempts must be >= 1"
            raise ValueError(msg)
        if self.retry_delay < 0:
            msg = "retry_delay must be >= 0"
            raise ValueError(msg)


# Step files are removed by a short-lived process; a virus scanner or indexer
# briefly holding the file open on Windows is the usual transient failure.
DEFAULT_UNLINK_RETRY = RetryConfig(max_attempts=3, retry_delay=0.1)


def retry_unlink(
    path: Path,
    *,
    config: RetryConfig = DEFAULT_UNLINK_RETRY,
    logger: logging.Logger | None = None,
    exc_factory: t.Callable[[Path, Exception], Exception] | None = None,
) -> None:
    """
    Remove *path*, retrying on ``PermissionError`` and other ``OSError``.

    A path that is already gone, or disappears between attempts, counts as
    removed.

    Parameters
    ----------
    path : Path
        File to remove.
    config : RetryConfig, optional
        Attempt budget and delay. Defaults to :data:`DEFAULT_UNLINK_RETRY`.
    logger : logging.Logger | None, optional
        Receives a debug record for each retry. Defaults to the module logger.
    exc_factory : Callable[[Path, Exception], Exception] | None, optional
        Builds the exception raised once attempts are exhausted. When omitted
        the last ``OSError`` is re-raised.
    """
    log = logger or _logger
    for attempt in range(config.max_attempts):
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            if attempt == config.max_attempts - 1:
                if exc_factory is not None:
                    raise exc_factory(path, exc) from exc
                raise
            log.debug(
                "Attempt %d to remove %s failed. Retrying in %.1fs...",
                attempt + 1,
                path,
                config.retry_delay,
            )
            time.sleep(config.retry_delay)
        else:
            return


__all__ = ["DEFAULT_UNLINK_RETRY", "RetryConfig", "retry_unlink"]
