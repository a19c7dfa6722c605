import logging
import logging.handlers
import os


def configure_logging(app):
    """Attach handlers to ``app.logger`` and the ``kint`` package logger.

    A stream handler is always present. When ``LOG_FILE`` is set a rotating
    file handler is added as well so production hosts keep a local trail.
    """
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt='%(asctime)s %(name)-20s %(levelname)-8s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )

    package_logger = logging.getLogger('kint')
    package_logger.setLevel(level)
    app.logger.setLevel(level)

    if not any(getattr(h, '_kint_handler', False) for h in package_logger.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        stream_handler._kint_handler = True
        package_logger.addHandler(stream_handler)

        log_file = app.config.get('LOG_FILE')
        if log_file:
            log_dir = os.path.dirname(os.path.abspath(log_file))
            os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding='utf-8',
            )
            file_handler.setFormatter(formatter)
            file_handler._kint_handler = True
            package_logger.addHandler(file_handler)

    if not app.debug:
        logging.getLogger('werkzeug').setLevel(logging.WARNING)
