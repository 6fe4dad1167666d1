import uvicorn

from loggable.config import get_config, log_config_sources
from loggable.core.logging import configure_logging_from_config, get_logger
from loggable.version import get_version
from loggable.web.app import create_app


def main():
    config = get_config()
    configure_logging_from_config(config)

    logger = get_logger()
    logger.info("Starting loggable %s", get_version())
    log_config_sources(config, logger)

    uvicorn.run(
        create_app(config=config),
        host=config.get("server.host", "127.0.0.1"),
        port=int(config.get("server.port", 8000)),
        log_config=None,
    )


if __name__ == "__main__":
    main()
