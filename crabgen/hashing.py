"""Content hashing of schema sets and generation contexts"""

import json
from typing import Optional

import xxhash

from .types import schemas_to_dicts

HASH_COMMAND_PREFIX = '// Hash:'


def schema_hash(schemas) -> str:
    """xxh3-64 of the canonical schema JSON as 16 lowercase hex digits.

    Declaration order is part of the input, so reordering methods or
    modules changes the hash.
    """
    payload = json.dumps(schemas_to_dicts(schemas), separators=(',', ':'), ensure_ascii=False)
    return xxhash.xxh3_64_hexdigest(payload.encode('utf-8'))


def context_hash(ctx) -> str:
    """Digest of everything generation reads: project name, Android package and schemas.

    The generated header embeds this rather than `schema_hash`, so renaming
    the project or its package in craby.toml also invalidates the outputs.
    """
    payload = json.dumps(
        {
            'projectName': ctx.project_name,
            'androidPackageName': ctx.android_package_name,
            'schemas': schemas_to_dicts(ctx.schemas),
        },
        separators=(',', ':'),
        ensure_ascii=False,
    )
    return xxhash.xxh3_64_hexdigest(payload.encode('utf-8'))


def hash_header(digest: str) -> str:
    return f'{HASH_COMMAND_PREFIX} {digest}'


def read_hash(text: str) -> Optional[str]:
    """Return the digest embedded by `hash_header`, if any"""
    for line in text.splitlines():
        if line.startswith(HASH_COMMAND_PREFIX):
            return line[len(HASH_COMMAND_PREFIX):].strip()
    return None
