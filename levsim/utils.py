import logging

from levsim import config as cfg


def setup_logging(level: int = None):
    """Route package diagnostics (parse warnings, writer failures) to stderr."""
    if level is None:
        level = logging.DEBUG if cfg.DEBUG else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def fmt_elapsed(seconds: float) -> str:
    """Format elapsed seconds as human-readable string."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    m, s = divmod(seconds, 60)
    return f"{int(m)}m {s:.1f}s"
