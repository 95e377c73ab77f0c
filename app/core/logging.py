import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [run_id=%(run_id)s stage=%(stage)s] - %(message)s"


class ContextFormatter(logging.Formatter):
    """Renders the generation run and pipeline stage a record belongs to.

    Records logged outside a run (startup, the diagram source) carry neither
    attribute and show '-' for both.
    """
    def format(self, record):
        for attr in ("run_id", "stage"):
            if not hasattr(record, attr):
                setattr(record, attr, "-")
        return super().format(record)


def configure_logging(level: int = logging.INFO) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler])
