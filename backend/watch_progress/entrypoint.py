from __future__ import annotations
import logging
from watch_progress.core.config import settings
from watch_progress.core.logging_config import configure_logging

_log = logging.getLogger(__name__)


def main():
    configure_logging(settings.log_level)
    _log.info("starting version=%s storage=%s data_dir=%s", settings.version, settings.storage_backend, settings.data_dir)
    for line in settings.diagnostics or []:
        _log.info("[config] %s", line)
    import uvicorn
    from uvicorn.config import LOGGING_CONFIG
    _log.info("launching uvicorn on %s:%s", settings.host, settings.port)
    try:
        uvicorn.run(
            'watch_progress.main:app',
            host=settings.host,
            port=settings.port,
            reload=False,
            log_level=settings.log_level.lower(),
            log_config=LOGGING_CONFIG,
        )
    finally:
        _log.info("uvicorn stopped")

if __name__ == '__main__':  # pragma: no cover
    main()
