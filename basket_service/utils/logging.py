# basket_service/utils/logging.py
import logging

from basket_service.utils.settings import LOG_LEVEL

_configured = False


def get_logger(name: str) -> logging.Logger:
    global _configured
    if not _configured:
        logging.basicConfig(
            level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        # requests/urllib3 log every connection at debug
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        _configured = True
    return logging.getLogger(name)
