import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(operation)s] %(message)s"


def configure_logging(level: str = "INFO"):
    handler = logging.StreamHandler()
    # Records from other libraries carry no operation field
    handler.setFormatter(logging.Formatter(LOG_FORMAT, defaults={"operation": "-"}))
    logging.basicConfig(level=level.upper(), handlers=[handler])
