import logging
import sys

import uvicorn

from usersapi.errors import ConfigError
from usersapi.logging import configure_logging
from usersapi.settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    try:
        settings = get_settings()
    except ConfigError as exc:
        logging.basicConfig(level=logging.ERROR)
        logger.critical("Refusing to start: %s", exc)
        sys.exit(1)

    configure_logging(settings)
    logger.info("Starting users API on http://%s:%d", settings.host, settings.port)
    uvicorn.run("web.app:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
