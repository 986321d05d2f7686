"""Module schema parser"""

import json
from pathlib import Path
from typing import Any

from .errors import SchemaError
from .types import (
    AliasDeclaration, ArrayType, BooleanType, DoubleType, EnumDeclaration,
    EnumMember, EnumTypeDeclaration, FloatType, FunctionSpec, FunctionType,
    GenericObjectType, Int32Type, MixedType, NullableType, NumberLiteralType,
    NumberType, ObjectProperty, ObjectType, Parameter, PromiseType,
    ReservedType, Schema, Signal, StringLiteralType, StringLiteralUnionType,
    StringType, TypeAliasType, UnionType, VoidType,
)

SIMPLE_TAGS = {
    'StringTypeAnnotation': StringType,
    'BooleanTypeAnnotation': BooleanType,
    'NumberTypeAnnotation': NumberType,
    'FloatTypeAnnotation': FloatType,
    'DoubleTypeAnnotation': DoubleType,
    'Int32TypeAnnotation': Int32Type,
    'GenericObjectTypeAnnotation': GenericObjectType,
    'MixedTypeAnnotation': MixedType,
    'VoidTypeAnnotation': VoidType,
}


class SchemaParser:
    """Parses JSON module schemas into the schema model"""

    def __init__(self, document: Any, source: str = '<schema>'):
        self.document = document
        self.source = source

    @classmethod
    def parse_file(cls, path: Path) -> list[Schema]:
        try:
            document = json.loads(Path(path).read_text(encoding='utf-8'))
        except json.JSONDecodeError as err:
            raise SchemaError(f"Invalid JSON: {err.msg}", {'file': str(path), 'line': err.lineno}) from err
        return cls(document, str(path)).parse()

    @classmethod
    def parse_files(cls, paths) -> list[Schema]:
        schemas = []
        for path in paths:
            schemas.extend(cls.parse_file(path))
        return schemas

    def parse(self) -> list[Schema]:
        """Parse a single module document or a library document holding several"""
        doc = self._expect_dict(self.document, '$')
        if 'moduleName' in doc:
            return [self._parse_module(doc, '$')]

        container = doc.get('schema', doc)
        modules = container.get('modules') if isinstance(container, dict) else None
        if not isinstance(modules, dict):
            raise SchemaError("Expected `moduleName` or `schema.modules`", {'file': self.source})
        schemas = []
        for name, module in modules.items():
            path = f'$.schema.modules.{name}'
            module = self._expect_dict(module, path)
            if 'moduleName' not in module:
                module = dict(module, moduleName=name)
            schemas.append(self._parse_module(module, path))
        return schemas

    def _parse_module(self, doc: dict, path: str) -> Schema:
        module_name = self._expect_str(doc.get('moduleName'), f'{path}.moduleName')
        spec = self._expect_dict(doc.get('spec', {}), f'{path}.spec')

        methods = []
        for i, raw in enumerate(spec.get('methods', [])):
            method_path = f'{path}.spec.methods[{i}]'
            raw = self._expect_dict(raw, method_path)
            annotation = self._parse_type(raw.get('typeAnnotation'), f'{method_path}.typeAnnotation')
            if not isinstance(annotation, FunctionType):
                raise SchemaError("Method type must be a FunctionTypeAnnotation",
                                  {'file': self.source, 'path': method_path})
            methods.append(FunctionSpec(
                name=self._expect_str(raw.get('name'), f'{method_path}.name'),
                type_annotation=annotation,
                optional=bool(raw.get('optional', False)),
            ))

        signals = []
        for i, raw in enumerate(spec.get('eventEmitters', [])):
            name = raw.get('name') if isinstance(raw, dict) else raw
            signals.append(Signal(self._expect_str(name, f'{path}.spec.eventEmitters[{i}]')))

        aliases = []
        for name, raw in self._expect_dict(doc.get('aliasMap', {}), f'{path}.aliasMap').items():
            annotation = self._parse_object(raw, f'{path}.aliasMap.{name}')
            aliases.append(AliasDeclaration(name, annotation))

        enums = []
        for name, raw in self._expect_dict(doc.get('enumMap', {}), f'{path}.enumMap').items():
            annotation = self._parse_type(raw, f'{path}.enumMap.{name}')
            if not isinstance(annotation, EnumDeclaration):
                raise SchemaError("Enum map entries must be EnumDeclaration",
                                  {'file': self.source, 'path': f'{path}.enumMap.{name}'})
            enums.append(EnumTypeDeclaration(name, annotation))

        return Schema(
            module_name=module_name,
            methods=tuple(methods),
            signals=tuple(signals),
            aliases=tuple(aliases),
            enums=tuple(enums),
            kind=doc.get('type', 'NativeModule'),
        )

    def _parse_type(self, raw: Any, path: str):
        raw = self._expect_dict(raw, path)
        tag = raw.get('type')

        if tag in SIMPLE_TAGS:
            return SIMPLE_TAGS[tag]()
        if tag == 'ReservedTypeAnnotation':
            return ReservedType(self._expect_str(raw.get('name'), f'{path}.name'))
        if tag == 'StringLiteralTypeAnnotation':
            return StringLiteralType(self._expect_str(raw.get('value'), f'{path}.value'))
        if tag == 'StringLiteralUnionTypeAnnotation':
            return StringLiteralUnionType(tuple(self._literal_values(raw.get('values', []), path)))
        if tag == 'NumberLiteralTypeAnnotation':
            return NumberLiteralType(raw.get('value'))
        if tag == 'EnumDeclaration':
            members = []
            for i, member in enumerate(raw.get('members', [])):
                member = self._expect_dict(member, f'{path}.members[{i}]')
                members.append(EnumMember(self._expect_str(member.get('name'), f'{path}.members[{i}].name'),
                                          member.get('value')))
            return EnumDeclaration(raw.get('memberType', 'StringTypeAnnotation'), tuple(members))
        if tag == 'ArrayTypeAnnotation':
            return ArrayType(self._parse_type(raw.get('elementType'), f'{path}.elementType'))
        if tag == 'FunctionTypeAnnotation':
            params = []
            for i, param in enumerate(raw.get('params', [])):
                param_path = f'{path}.params[{i}]'
                param = self._expect_dict(param, param_path)
                params.append(Parameter(
                    name=self._expect_str(param.get('name'), f'{param_path}.name'),
                    type_annotation=self._parse_type(param.get('typeAnnotation'), f'{param_path}.typeAnnotation'),
                    optional=bool(param.get('optional', False)),
                ))
            return_type = self._parse_type(raw.get('returnTypeAnnotation'), f'{path}.returnTypeAnnotation')
            return FunctionType(return_type, tuple(params))
        if tag == 'ObjectTypeAnnotation':
            return self._parse_object(raw, path)
        if tag == 'UnionTypeAnnotation':
            types = tuple(self._parse_type(t, f'{path}.types[{i}]') for i, t in enumerate(raw.get('types', [])))
            return UnionType(raw.get('memberType', ''), types)
        if tag == 'NullableTypeAnnotation':
            return NullableType(self._parse_type(raw.get('typeAnnotation'), f'{path}.typeAnnotation'))
        if tag == 'TypeAliasTypeAnnotation':
            return TypeAliasType(self._expect_str(raw.get('name'), f'{path}.name'))
        if tag == 'PromiseTypeAnnotation':
            element = raw.get('elementType')
            return PromiseType(self._parse_type(element, f'{path}.elementType') if element else None)

        raise SchemaError(f"Unknown type annotation tag: {tag!r}", {'file': self.source, 'path': path})

    def _parse_object(self, raw: Any, path: str) -> ObjectType:
        raw = self._expect_dict(raw, path)
        if raw.get('type', 'ObjectTypeAnnotation') != 'ObjectTypeAnnotation':
            raise SchemaError("Expected ObjectTypeAnnotation", {'file': self.source, 'path': path})
        if raw.get('properties') is None:
            return ObjectType(None)
        properties = []
        for i, prop in enumerate(raw['properties']):
            prop_path = f'{path}.properties[{i}]'
            prop = self._expect_dict(prop, prop_path)
            properties.append(ObjectProperty(
                name=self._expect_str(prop.get('name'), f'{prop_path}.name'),
                type_annotation=self._parse_type(prop.get('typeAnnotation'), f'{prop_path}.typeAnnotation'),
                optional=bool(prop.get('optional', False)),
            ))
        return ObjectType(tuple(properties))

    def _literal_values(self, values, path: str) -> list[str]:
        # Older schema versions nest literals as annotations
        result = []
        for i, value in enumerate(values):
            if isinstance(value, dict):
                value = value.get('value')
            result.append(self._expect_str(value, f'{path}.values[{i}]'))
        return result

    def _expect_dict(self, value: Any, path: str) -> dict:
        if not isinstance(value, dict):
            raise SchemaError("Expected an object", {'file': self.source, 'path': path})
        return value

    def _expect_str(self, value: Any, path: str) -> str:
        if not isinstance(value, str) or not value:
            raise SchemaError("Expected a non-empty string", {'file': self.source, 'path': path})
        return value
