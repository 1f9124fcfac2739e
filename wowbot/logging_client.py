"""
Logging client configuration for console output and the centralized log service.
"""
import logging
import logging.handlers
import os

NOISY_LOGGERS = ("botocore", "boto3", "aioboto3", "aiobotocore", "urllib3",
                 "httpx", "httpcore", "openai", "discord.gateway", "discord.http")

_factory_installed = False


def _install_record_factory(service_name: str):
    """Stamp every log record with the service name (installed once per process)."""
    global _factory_installed
    if _factory_installed:
        return

    old_factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        record = old_factory(*args, **kwargs)
        record.service = service_name
        return record

    logging.setLogRecordFactory(record_factory)
    _factory_installed = True


def setup_logger(service_name: str = 'wowbot') -> logging.Logger:
    """
    Setup logger for the bot.

    Logs always go to the console. When LOGGING_HOST is set they are also
    shipped to the centralized logging service over a socket handler.

    Args:
        service_name: Name of service (also the logger name)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(service_name)
    logger.setLevel(logging.DEBUG)

    # Remove existing handlers
    logger.handlers = []

    _install_record_factory(service_name)

    log_host = os.getenv('LOGGING_HOST')
    if log_host:
        log_port = int(os.getenv('LOGGING_PORT', 9999))
        logger.addHandler(logging.handlers.SocketHandler(log_host, log_port))

    console_handler = logging.StreamHandler()
    console_formatter = logging.Formatter(
        '%(asctime)s - [%(service)s] - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
