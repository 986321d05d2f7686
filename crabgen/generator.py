"""Code generation orchestrator"""

from pathlib import Path
from typing import Optional, Sequence

from .android_generator import AndroidGenerator
from .bridge_generator import BridgeGenerator
from .common_generator import Generator, with_generated_comment
from .host_generator import HostGenerator
from .ios_generator import IosGenerator
from .logging import get_logger
from .types import CodegenContext, GenerateResult

logger = get_logger("generator")


def default_generators() -> list[Generator]:
    return [BridgeGenerator(), HostGenerator(), AndroidGenerator(), IosGenerator()]


class CodeGenerator:
    """Runs every emitter in a fixed order and finalizes their artifacts"""

    def __init__(self, generators: Optional[Sequence[Generator]] = None):
        self.generators = list(generators) if generators is not None else default_generators()

    def generate(self, ctx: CodegenContext) -> list[GenerateResult]:
        """Collect artifacts from all emitters; any failure aborts the whole run"""
        results = []
        for generator in self.generators:
            logger.debug("Running %s generator", generator.name)
            results.extend(self.finalize(result) for result in generator.generate(ctx))
        logger.debug("Generated %d artifacts for %d schemas", len(results), len(ctx.schemas))
        return results

    def run(self, ctx: CodegenContext) -> list[GenerateResult]:
        """Generate, then clear stale files; nothing is removed if generation fails"""
        results = self.generate(ctx)
        self.cleanup(ctx)
        return results

    def cleanup(self, ctx: CodegenContext) -> list[Path]:
        removed = []
        for generator in self.generators:
            removed.extend(generator.cleanup(ctx))
        return removed

    @staticmethod
    def finalize(result: GenerateResult) -> GenerateResult:
        content = result.content
        if result.overwrite:
            content = with_generated_comment(result.path, content)
        if not content.endswith("\n"):
            content += "\n"
        return GenerateResult(result.path, content, result.overwrite)
