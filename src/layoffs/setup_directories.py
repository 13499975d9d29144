"""
Directory setup for the cleaning pipeline.

Layout under the base directory:
- clean/: cleaned dataset in every configured format
- logs/: one log file per run
- the run ledger database sits in the base directory itself
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def setup_output_directories(base_output_dir=None):
    """
    Set up the output directory structure.

    Parameters
    ----------
    base_output_dir : str or Path, optional
        Base output directory. Defaults to ./output under the current
        working directory.

    Returns
    -------
    dict
        Dictionary with paths: 'base', 'clean', 'logs'
    """
    if base_output_dir is None:
        base_output_dir = Path.cwd() / "output"

    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {
        "base": base_output_dir,
        "clean": base_output_dir / "clean",
        "logs": base_output_dir / "logs",
    }

    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)

    for key, path in directories.items():
        logger.debug("  %-6s: %s", key, path)

    return directories
