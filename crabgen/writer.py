"""Writes generated artifacts to disk"""

from dataclasses import dataclass, field
from pathlib import Path

from .logging import get_logger
from .paths import craby_tmp_dir

logger = get_logger("writer")


@dataclass
class WriteReport:
    written: list[Path] = field(default_factory=list)
    preserved: list[Path] = field(default_factory=list)
    diverted: list[Path] = field(default_factory=list)


def write_results(root: Path, results, overwrite: bool = True) -> WriteReport:
    """Write artifacts under `root`.

    Scaffolds (`overwrite=False`) that already exist are left untouched and
    the fresh content goes to `.craby/<name>` for comparison. With
    `overwrite=False` every existing file is treated that way.
    """
    report = WriteReport()
    tmp_dir = craby_tmp_dir(root)
    for result in results:
        path = Path(result.path)
        if path.exists() and not (overwrite and result.overwrite):
            diverted = tmp_dir / path.name
            diverted.parent.mkdir(parents=True, exist_ok=True)
            diverted.write_text(result.content, encoding="utf-8")
            report.preserved.append(path)
            report.diverted.append(diverted)
            logger.debug("Kept %s, new content in %s", path, diverted)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(result.content, encoding="utf-8")
        report.written.append(path)
        logger.debug("Generated: %s", path)
    return report
