"""
Layout of the on-disk ontology repository.

Files of a submission live in ``<repository>/<acronym>/<submission id>/``.
"""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def submission_dir(repository_folder: Union[str, Path], acronym: str, submission_id: int) -> Path:
    """Директория с файлами одного сабмишена."""
    return Path(repository_folder) / acronym / str(submission_id)


def latest_log_file(repository_folder: Union[str, Path], acronym: str, submission_id: int) -> str:
    """Последний изменённый ``*.log`` сабмишена или пустая строка."""
    directory = submission_dir(repository_folder, acronym, submission_id)
    try:
        logs = [path for path in directory.glob("*.log") if path.is_file()]
        if not logs:
            return ""
        return str(max(logs, key=lambda path: path.stat().st_mtime))
    except OSError as e:
        logger.debug(f"No log file for {acronym}/{submission_id}: {e}")
        return ""


def is_within(path: Union[str, Path], directory: Union[str, Path]) -> bool:
    """Лежит ли ``path`` внутри ``directory`` (после resolve)."""
    try:
        Path(path).resolve().relative_to(Path(directory).resolve())
        return True
    except ValueError:
        return False
