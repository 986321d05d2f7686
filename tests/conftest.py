from __future__ import annotations

from pathlib import Path

import pytest

from crabgen.types import (
    BooleanType, CodegenContext, FunctionSpec, FunctionType, NullableType,
    NumberType, Parameter, Schema, Signal, StringType, VoidType,
)


def method(name, params=(), returns=None, optional=False) -> FunctionSpec:
    """Build a method from (name, annotation[, optional]) tuples."""
    built = []
    for spec in params:
        built.append(Parameter(spec[0], spec[1], spec[2] if len(spec) > 2 else False))
    return FunctionSpec(name, FunctionType(returns or VoidType(), tuple(built)), optional)


def make_context(root: Path, *schemas: Schema, project_name: str = "my-app",
                 package: str = "com.example") -> CodegenContext:
    return CodegenContext(
        project_name=project_name,
        root=root,
        android_package_name=package,
        schemas=tuple(schemas),
    )


@pytest.fixture
def multiply_schema() -> Schema:
    return Schema(
        module_name="MyModule",
        methods=(method("multiply", [("a", NumberType()), ("b", NumberType())], NumberType()),),
    )


@pytest.fixture
def test_module_schema() -> Schema:
    """Every supported shape: numbers, strings, booleans, nullables, optionals, void, signals."""
    return Schema(
        module_name="MyTestModule",
        methods=(
            method("numericMethod", [("arg", NumberType())], NumberType()),
            method("stringMethod", [("arg", StringType())], StringType()),
            method("booleanMethod", [("arg", BooleanType())], BooleanType()),
            method("nullableMethod", [("arg", NullableType(NumberType()))], NullableType(StringType())),
            method("optionalMethod", [("label", StringType()), ("count", NumberType(), True)], NumberType()),
            method("triggerSignal"),
        ),
        signals=(Signal("onSignal"), Signal("onProgress")),
    )


@pytest.fixture
def ctx(tmp_path: Path, test_module_schema: Schema) -> CodegenContext:
    return make_context(tmp_path, test_module_schema)


@pytest.fixture
def schema_document() -> dict:
    """JSON form of a module as produced by the schema extractor."""
    number = {"type": "NumberTypeAnnotation"}
    string = {"type": "StringTypeAnnotation"}
    return {
        "moduleName": "Calculator",
        "type": "NativeModule",
        "aliasMap": {
            "Point": {
                "type": "ObjectTypeAnnotation",
                "properties": [
                    {"name": "x", "optional": False, "typeAnnotation": number},
                    {"name": "y", "optional": False, "typeAnnotation": number},
                ],
            }
        },
        "enumMap": {
            "Mode": {
                "type": "EnumDeclaration",
                "memberType": "StringTypeAnnotation",
                "members": [{"name": "Fast", "value": "fast"}, {"name": "Slow", "value": "slow"}],
            }
        },
        "spec": {
            "eventEmitters": ["onReady", {"name": "onResult"}],
            "methods": [
                {
                    "name": "add",
                    "optional": False,
                    "typeAnnotation": {
                        "type": "FunctionTypeAnnotation",
                        "returnTypeAnnotation": number,
                        "params": [
                            {"name": "a", "optional": False, "typeAnnotation": number},
                            {"name": "b", "optional": False, "typeAnnotation": number},
                        ],
                    },
                },
                {
                    "name": "describe",
                    "optional": False,
                    "typeAnnotation": {
                        "type": "FunctionTypeAnnotation",
                        "returnTypeAnnotation": {"type": "NullableTypeAnnotation", "typeAnnotation": string},
                        "params": [
                            {"name": "value", "optional": True, "typeAnnotation": number},
                        ],
                    },
                },
            ],
        },
    }
