"""Common Generator - shared base for every emitter"""

from pathlib import Path

from .logging import get_logger
from .types import CodegenContext, GenerateResult

GENERATED_COMMENT = "@generated by crabgen - DO NOT EDIT"

# (open, close) comment delimiters per file suffix
COMMENT_SYNTAX = {
    ".rs": ("//", ""),
    ".cpp": ("//", ""),
    ".hpp": ("//", ""),
    ".h": ("//", ""),
    ".mm": ("//", ""),
    ".kt": ("//", ""),
    ".gradle": ("//", ""),
    ".txt": ("#", ""),
    ".properties": ("#", ""),
    ".xml": ("<!--", " -->"),
}


def indent_str(text: str, level: int = 1, width: int = 4) -> str:
    """Indent every non-empty line of `text`"""
    pad = " " * (level * width)
    return "\n".join(pad + line if line else line for line in text.split("\n"))


def generated_marker(path: Path):
    syntax = COMMENT_SYNTAX.get(Path(path).suffix)
    if syntax is None:
        return None
    start, end = syntax
    return f"{start} {GENERATED_COMMENT}{end}"


def with_generated_comment(path: Path, content: str) -> str:
    """Prepend the generated marker in the file type's comment syntax"""
    marker = generated_marker(path)
    if marker is None:
        return content
    return f"{marker}\n{content}"


def without_generated_comment(content: str) -> str:
    """Strip a marker added by `with_generated_comment`"""
    first, sep, rest = content.partition("\n")
    if GENERATED_COMMENT in first:
        return rest
    return content


def is_generated_file(path: Path) -> bool:
    """True when the first line of `path` carries the generated marker"""
    try:
        with open(path, encoding="utf-8") as f:
            first = f.readline()
    except UnicodeDecodeError:
        return False
    return GENERATED_COMMENT in first


class Generator:
    """Base emitter: `generate` is pure, `cleanup` removes stale outputs"""

    name = "generator"

    def __init__(self):
        self.logger = get_logger(self.name)

    def generate(self, ctx: CodegenContext) -> list[GenerateResult]:
        raise NotImplementedError

    def cleanup(self, ctx: CodegenContext) -> list[Path]:
        """Delete generated files this emitter owns that a previous run may have left behind.

        Files without the generated marker were written by hand and are kept.
        """
        removed = []
        for path in self.stale_files(ctx):
            if not path.is_file():
                continue
            if not is_generated_file(path):
                self.logger.debug("Keeping hand-written %s", path)
                continue
            path.unlink()
            removed.append(path)
            self.logger.debug("Removed %s", path)
        return removed

    def stale_files(self, ctx: CodegenContext) -> list[Path]:
        return []

    @staticmethod
    def _glob(directory: Path, pattern: str) -> list[Path]:
        if not directory.is_dir():
            return []
        return sorted(directory.glob(pattern))
