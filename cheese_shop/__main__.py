import logging

import uvicorn

from .config import get_settings
from .logconfig import configure_logging
from .main import app


def main() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    logging.getLogger(__name__).info(
        "Cheese shop API listening on %s:%d", settings.host, settings.port
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
