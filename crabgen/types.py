"""Data types for module schemas and generated artifacts"""

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union


# Type annotations. Each variant of the schema's `typeAnnotation` tag maps to
# one frozen dataclass; dispatch is by `isinstance`.

@dataclass(frozen=True)
class ReservedType:
    """Reserved runtime type such as `RootTag`"""
    name: str


@dataclass(frozen=True)
class StringType:
    pass


@dataclass(frozen=True)
class StringLiteralType:
    value: str


@dataclass(frozen=True)
class StringLiteralUnionType:
    values: tuple[str, ...] = ()


@dataclass(frozen=True)
class BooleanType:
    pass


@dataclass(frozen=True)
class NumberType:
    pass


@dataclass(frozen=True)
class FloatType:
    pass


@dataclass(frozen=True)
class DoubleType:
    pass


@dataclass(frozen=True)
class Int32Type:
    pass


@dataclass(frozen=True)
class NumberLiteralType:
    value: float


@dataclass(frozen=True)
class EnumMember:
    name: str
    value: Union[str, float]


@dataclass(frozen=True)
class EnumDeclaration:
    """Inline enum; `member_type` is `StringTypeAnnotation` or `NumberTypeAnnotation`"""
    member_type: str
    members: tuple[EnumMember, ...] = ()


@dataclass(frozen=True)
class ArrayType:
    element_type: 'TypeAnnotation'


@dataclass(frozen=True)
class Parameter:
    """Method parameter"""
    name: str
    type_annotation: 'TypeAnnotation'
    optional: bool = False


@dataclass(frozen=True)
class FunctionType:
    return_type: 'TypeAnnotation'
    params: tuple[Parameter, ...] = ()


@dataclass(frozen=True)
class GenericObjectType:
    pass


@dataclass(frozen=True)
class ObjectProperty:
    name: str
    type_annotation: 'TypeAnnotation'
    optional: bool = False


@dataclass(frozen=True)
class ObjectType:
    properties: Optional[tuple[ObjectProperty, ...]] = None


@dataclass(frozen=True)
class UnionType:
    member_type: str
    types: tuple['TypeAnnotation', ...] = ()


@dataclass(frozen=True)
class MixedType:
    pass


@dataclass(frozen=True)
class VoidType:
    pass


@dataclass(frozen=True)
class NullableType:
    type_annotation: 'TypeAnnotation'


@dataclass(frozen=True)
class TypeAliasType:
    """Reference to a hoisted alias declaration"""
    name: str


@dataclass(frozen=True)
class PromiseType:
    element_type: Optional['TypeAnnotation'] = None


TypeAnnotation = Union[
    ReservedType, StringType, StringLiteralType, StringLiteralUnionType,
    BooleanType, NumberType, FloatType, DoubleType, Int32Type,
    NumberLiteralType, EnumDeclaration, ArrayType, FunctionType,
    GenericObjectType, ObjectType, UnionType, MixedType, VoidType,
    NullableType, TypeAliasType, PromiseType,
]

TYPE_ANNOTATIONS = TypeAnnotation.__args__

STRING_TYPES = (StringType, StringLiteralType, StringLiteralUnionType)
NUMBER_TYPES = (NumberType, FloatType, DoubleType, Int32Type, NumberLiteralType)


def unwrap_nullable(annotation: TypeAnnotation) -> tuple[TypeAnnotation, bool]:
    """Strip every nullable layer; returns (innermost, was_nullable)"""
    nullable = False
    while isinstance(annotation, NullableType):
        annotation = annotation.type_annotation
        nullable = True
    return annotation, nullable


@dataclass(frozen=True)
class FunctionSpec:
    """Module method"""
    name: str
    type_annotation: FunctionType
    optional: bool = False

    @property
    def params(self) -> tuple[Parameter, ...]:
        return self.type_annotation.params

    @property
    def return_type(self) -> TypeAnnotation:
        return self.type_annotation.return_type

    @property
    def required_arity(self) -> int:
        """Arguments a caller must pass; only trailing optional parameters may be omitted"""
        required = 0
        for index, param in enumerate(self.params):
            if not param.optional:
                required = index + 1
        return required


@dataclass(frozen=True)
class Signal:
    """Named event a module can emit"""
    name: str


@dataclass(frozen=True)
class AliasDeclaration:
    name: str
    annotation: ObjectType


@dataclass(frozen=True)
class EnumTypeDeclaration:
    name: str
    annotation: EnumDeclaration


@dataclass(frozen=True)
class Schema:
    """One native module: methods, signals and hoisted declarations"""
    module_name: str
    methods: tuple[FunctionSpec, ...] = ()
    signals: tuple[Signal, ...] = ()
    aliases: tuple[AliasDeclaration, ...] = ()
    enums: tuple[EnumTypeDeclaration, ...] = ()
    kind: str = 'NativeModule'

    def to_dict(self) -> dict[str, Any]:
        """Canonical form with fixed key order, used for hashing"""
        return {
            'moduleName': self.module_name,
            'type': self.kind,
            'aliasMap': {a.name: annotation_to_dict(a.annotation) for a in self.aliases},
            'enumMap': {e.name: annotation_to_dict(e.annotation) for e in self.enums},
            'spec': {
                'eventEmitters': [{'name': s.name} for s in self.signals],
                'methods': [
                    {
                        'name': m.name,
                        'optional': m.optional,
                        'typeAnnotation': annotation_to_dict(m.type_annotation),
                    }
                    for m in self.methods
                ],
            },
        }


def annotation_to_dict(annotation: TypeAnnotation) -> dict[str, Any]:
    """Serialize an annotation back to its tagged JSON form"""
    if isinstance(annotation, ReservedType):
        return {'type': 'ReservedTypeAnnotation', 'name': annotation.name}
    if isinstance(annotation, StringLiteralType):
        return {'type': 'StringLiteralTypeAnnotation', 'value': annotation.value}
    if isinstance(annotation, StringLiteralUnionType):
        return {'type': 'StringLiteralUnionTypeAnnotation', 'values': list(annotation.values)}
    if isinstance(annotation, NumberLiteralType):
        return {'type': 'NumberLiteralTypeAnnotation', 'value': annotation.value}
    if isinstance(annotation, EnumDeclaration):
        return {
            'type': 'EnumDeclaration',
            'memberType': annotation.member_type,
            'members': [{'name': m.name, 'value': m.value} for m in annotation.members],
        }
    if isinstance(annotation, ArrayType):
        return {'type': 'ArrayTypeAnnotation', 'elementType': annotation_to_dict(annotation.element_type)}
    if isinstance(annotation, FunctionType):
        return {
            'type': 'FunctionTypeAnnotation',
            'returnTypeAnnotation': annotation_to_dict(annotation.return_type),
            'params': [
                {'name': p.name, 'optional': p.optional, 'typeAnnotation': annotation_to_dict(p.type_annotation)}
                for p in annotation.params
            ],
        }
    if isinstance(annotation, ObjectType):
        result = {'type': 'ObjectTypeAnnotation'}
        if annotation.properties is not None:
            result['properties'] = [
                {'name': p.name, 'optional': p.optional, 'typeAnnotation': annotation_to_dict(p.type_annotation)}
                for p in annotation.properties
            ]
        return result
    if isinstance(annotation, UnionType):
        return {
            'type': 'UnionTypeAnnotation',
            'memberType': annotation.member_type,
            'types': [annotation_to_dict(t) for t in annotation.types],
        }
    if isinstance(annotation, NullableType):
        return {'type': 'NullableTypeAnnotation', 'typeAnnotation': annotation_to_dict(annotation.type_annotation)}
    if isinstance(annotation, TypeAliasType):
        return {'type': 'TypeAliasTypeAnnotation', 'name': annotation.name}
    if isinstance(annotation, PromiseType):
        result = {'type': 'PromiseTypeAnnotation'}
        if annotation.element_type is not None:
            result['elementType'] = annotation_to_dict(annotation.element_type)
        return result
    return {'type': TAG_BY_CLASS[type(annotation)]}


# Tags of variants that carry no payload
TAG_BY_CLASS = {
    StringType: 'StringTypeAnnotation',
    BooleanType: 'BooleanTypeAnnotation',
    NumberType: 'NumberTypeAnnotation',
    FloatType: 'FloatTypeAnnotation',
    DoubleType: 'DoubleTypeAnnotation',
    Int32Type: 'Int32TypeAnnotation',
    GenericObjectType: 'GenericObjectTypeAnnotation',
    MixedType: 'MixedTypeAnnotation',
    VoidType: 'VoidTypeAnnotation',
}


def schemas_to_dicts(schemas) -> list[dict[str, Any]]:
    return [schema.to_dict() for schema in schemas]


class Platform(enum.Enum):
    """Mobile target of a platform FFI layer"""
    ANDROID = 'android'
    IOS = 'ios'


@dataclass(frozen=True)
class InteropInfo:
    """Marshalling metadata for one (type, platform) pair"""
    import_module: Optional[str] = None
    from_ffi_fn: Optional[str] = None
    to_ffi_fn: Optional[str] = None

    @classmethod
    def none(cls) -> 'InteropInfo':
        return cls()

    @property
    def required(self) -> bool:
        return self.from_ffi_fn is not None or self.to_ffi_fn is not None


@dataclass(frozen=True)
class CodegenContext:
    """Everything a generation run needs"""
    project_name: str
    root: Path
    android_package_name: str
    schemas: tuple[Schema, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class GenerateResult:
    """One generated artifact; `overwrite=False` marks a user-owned scaffold"""
    path: Path
    content: str
    overwrite: bool = True
