import logging

from planner.config import LOG_FMT, LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL) -> logging.Logger:
    """Attach a single console handler to the ``planner`` logger tree."""
    lgr = logging.getLogger("planner")
    lgr.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    # Remove any existing handlers so repeated app creation doesn't duplicate output
    for _h in list(lgr.handlers):
        lgr.removeHandler(_h)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FMT))
    lgr.addHandler(handler)
    return lgr
