"""
crabgen command line

Reads craby.toml and the module schemas of a project and generates:
  1. Native bridge (cxx bridge + C++ TurboModule objects)
  2. Host bindings (Rust traits, glue and implementation stubs)
  3. Android JNI layer
  4. iOS C ABI layer

Usage:
    crabgen path/to/project
    crabgen path/to/project --schema NativeCalculator.json --verbose
"""

import argparse
import sys
import time
from pathlib import Path

from .config import load_config
from .errors import CodegenError
from .generator import CodeGenerator
from .hashing import context_hash, read_hash
from .logging import configure_logging
from .parser import SchemaParser
from .paths import crate_src_dir
from .writer import write_results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crabgen", description="Generate native module bindings from schemas")
    parser.add_argument("project_root", nargs="?", default=".", help="Project root containing craby.toml")
    parser.add_argument("--schema", action="append", default=[], help="Schema JSON file (repeatable)")
    parser.add_argument("--no-overwrite", action="store_true", help="Divert every existing file to .craby/")
    parser.add_argument("--force", action="store_true", help="Regenerate even if schemas and config are unchanged")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file")
    return parser


def main(argv=None) -> int:
    start_time = time.perf_counter()
    args = build_parser().parse_args(argv)
    logger = configure_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        config = load_config(Path(args.project_root))
        schema_files = [Path(p) for p in args.schema] or config.schema_files()
        if not schema_files:
            logger.error("No schema files found in %s", config.schema_dir)
            return 1
        schemas = SchemaParser.parse_files(schema_files)
        ctx = config.to_context(schemas)

        generated_rs = crate_src_dir(ctx.root) / "generated.rs"
        if not args.force and generated_rs.exists():
            if read_hash(generated_rs.read_text(encoding="utf-8")) == context_hash(ctx):
                logger.info("Schemas and config unchanged, skipping generation")
                return 0

        results = CodeGenerator().run(ctx)
        report = write_results(ctx.root, results, overwrite=not args.no_overwrite)
    except CodegenError as err:
        logger.error("%s", err)
        logger.debug("%s", err.to_dict())
        return 1

    for path in report.written:
        logger.info("Generated: %s", path.relative_to(ctx.root))
    for path in report.preserved:
        logger.info("Kept existing: %s", path.relative_to(ctx.root))

    elapsed = time.perf_counter() - start_time
    print(f"Generation completed in {elapsed*1000:.2f} ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
