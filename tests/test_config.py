from __future__ import annotations

import pytest

from crabgen.config import load_config
from crabgen.errors import ConfigError


def _write_config(root, text):
    (root / "craby.toml").write_text(text, encoding="utf-8")


def test_load_config_defaults(tmp_path):
    _write_config(tmp_path, '[project]\nname = "my-app"\n')

    config = load_config(tmp_path)

    assert config.root == tmp_path.resolve()
    assert config.project_name == "my-app"
    assert config.android_package_name == "com.myapp"
    assert config.schema_dir == tmp_path.resolve() / ".craby" / "schemas"


def test_load_config_overrides(tmp_path):
    _write_config(
        tmp_path,
        '[project]\nname = "my-app"\nschema_dir = "schemas"\n\n'
        '[android]\npackage_name = "org.example.app"\n',
    )

    config = load_config(tmp_path)

    assert config.android_package_name == "org.example.app"
    assert config.schema_dir == tmp_path.resolve() / "schemas"


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)

    assert "craby.toml not found" in str(excinfo.value)


def test_invalid_toml(tmp_path):
    _write_config(tmp_path, "[project\nname = ")

    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)

    assert excinfo.value.context["file"].endswith("craby.toml")


def test_project_name_is_required(tmp_path):
    _write_config(tmp_path, '[project]\nname = "  "\n')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_wrong_value_type(tmp_path):
    _write_config(tmp_path, "[project]\nname = 3\n")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_schema_files_are_sorted(tmp_path):
    _write_config(tmp_path, '[project]\nname = "my-app"\n')
    schema_dir = tmp_path / ".craby" / "schemas"
    schema_dir.mkdir(parents=True)
    for name in ("Zeta.json", "Alpha.json", "notes.txt"):
        (schema_dir / name).write_text("{}")

    config = load_config(tmp_path)

    assert [p.name for p in config.schema_files()] == ["Alpha.json", "Zeta.json"]


def test_to_context(tmp_path, multiply_schema):
    _write_config(tmp_path, '[project]\nname = "my-app"\n')

    ctx = load_config(tmp_path).to_context([multiply_schema])

    assert ctx.project_name == "my-app"
    assert ctx.schemas == (multiply_schema,)
