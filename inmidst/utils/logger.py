"""
Session logging for command-line runs.

The engine only emits log records; sinks are added here, once per session,
by the script that owns the run. Context-specific wrappers live in
contexts/{context}/logger.py.
"""

import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from inmidst import __version__

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

# Console colors for levels whose loguru defaults are hard to tell apart
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def setup_logger(context_name: str, log_dir: Path, extra_provenance: dict = None) -> Path:
    """
    Replace loguru sinks with a session log file and a stderr console.

    The file receives DEBUG and above (every ranking pass is traced there);
    the console receives INFO and above on stderr, so JSON written to stdout
    stays machine-readable. A provenance header opens the file.

    Args:
        context_name: Context identifier; names the log file ("target" -> target.log)
        log_dir: Directory for this session, created if missing
        extra_provenance: Run parameters to record in the header (input file, mask, ...)

    Returns:
        Path to log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", encoding="utf-8")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    log_provenance(context_name, extra_provenance)
    return log_file


def log_provenance(context_name: str, extra_context: dict = None) -> None:
    """
    Record what produced this session: package version, command, and run parameters.

    Parameters whose value is None are skipped.
    """
    logger.info("=" * 80)
    logger.info(f"inmidst {__version__} ({context_name})")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        if value is not None:
            logger.info(f"{key}: {value}")

    logger.info("=" * 80)
