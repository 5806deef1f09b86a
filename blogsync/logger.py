import logging

logger = logging.getLogger('blogsync')


def configure_logging(level: str = 'INFO'):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    return logger
