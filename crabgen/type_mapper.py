"""Type mapping from schema type annotations to host, bridge and FFI types"""

from contextlib import contextmanager

from .errors import UnsupportedTypeError
from .logging import get_logger
from .types import (
    BooleanType, FunctionSpec, InteropInfo, NullableType, NUMBER_TYPES,
    Parameter, Platform, Schema, STRING_TYPES, TypeAnnotation, VoidType,
    unwrap_nullable,
)

logger = get_logger('type_mapper')


def _kind(annotation: TypeAnnotation) -> str:
    """Collapse a non-nullable annotation to its scalar kind"""
    if isinstance(annotation, NUMBER_TYPES):
        return 'number'
    if isinstance(annotation, STRING_TYPES):
        return 'string'
    if isinstance(annotation, BooleanType):
        return 'boolean'
    if isinstance(annotation, VoidType):
        return 'void'
    logger.error("Unsupported type annotation: %r", annotation)
    raise UnsupportedTypeError(
        f"Unsupported type annotation: {type(annotation).__name__}",
        {'annotation': repr(annotation)},
    )


@contextmanager
def type_context(**context):
    """Attach module/method/param location to resolution errors raised inside"""
    try:
        yield
    except UnsupportedTypeError as err:
        for key, value in context.items():
            err.context.setdefault(key, value)
        raise


class TypeMapper:
    """Maps schema type annotations to every target representation"""

    HOST_TYPES = {
        'number': 'f64',
        'string': 'String',
        'boolean': 'bool',
        'void': '()',
    }

    # Rust side of the cxx bridge
    BRIDGE_TYPES = {
        'number': 'f64',
        'string': 'String',
        'boolean': 'bool',
        'void': '()',
    }

    CXX_TYPES = {
        'number': 'double',
        'string': 'rust::String',
        'boolean': 'bool',
        'void': 'void',
    }

    FFI_TYPES = {
        Platform.ANDROID: {
            'number': 'jdouble',
            'string': 'jstring',
            'boolean': 'bool',
            'void': '()',
        },
        Platform.IOS: {
            'number': 'c_double',
            'string': '*const c_char',
            'boolean': 'bool',
            'void': '()',
        },
    }

    # Owned strings handed back to the caller
    FFI_RETURN_TYPES = {
        Platform.IOS: {'string': '*mut c_char'},
    }

    FFI_FAILURE_VALUES = {
        'number': '0.0',
        'string': 'std::ptr::null_mut()',
        'boolean': 'false',
        'void': '()',
    }

    KOTLIN_TYPES = {
        'number': 'Double',
        'string': 'String',
        'boolean': 'Boolean',
        'void': 'Unit',
    }

    C_TYPES = {
        'number': 'double',
        'string': 'const char*',
        'boolean': 'bool',
        'void': 'void',
    }

    C_RETURN_TYPES = {
        'string': 'char*',
    }

    NULLABLE_MIRRORS = {
        'number': 'NullableNumber',
        'string': 'NullableString',
        'boolean': 'NullableBoolean',
    }

    @classmethod
    def kind(cls, annotation: TypeAnnotation) -> str:
        """Scalar kind of the innermost type: number, string, boolean or void"""
        inner, _ = unwrap_nullable(annotation)
        return _kind(inner)

    @classmethod
    def to_host(cls, annotation: TypeAnnotation) -> str:
        """Convert annotation to host (Rust) type"""
        if isinstance(annotation, NullableType):
            inner, _ = unwrap_nullable(annotation)
            return f'Option<{cls.to_host(inner)}>'
        return cls.HOST_TYPES[_kind(annotation)]

    @classmethod
    def param_to_host(cls, param: Parameter) -> str:
        """Host type of a parameter; optional and nullable share one Option"""
        host_type = cls.to_host(param.type_annotation)
        if param.optional and not host_type.startswith('Option<'):
            return f'Option<{host_type}>'
        return host_type

    @classmethod
    def is_nullable_param(cls, param: Parameter) -> bool:
        return param.optional or isinstance(param.type_annotation, NullableType)

    @classmethod
    def _nullable_mirror(cls, kind: str) -> str:
        if kind not in cls.NULLABLE_MIRRORS:
            raise UnsupportedTypeError(f"Nullable {kind} has no bridge representation")
        return cls.NULLABLE_MIRRORS[kind]

    @classmethod
    def to_bridge(cls, annotation: TypeAnnotation, nullable: bool = False) -> str:
        """Convert annotation to the Rust type used inside the cxx bridge"""
        inner, was_nullable = unwrap_nullable(annotation)
        kind = _kind(inner)
        if nullable or was_nullable:
            return cls._nullable_mirror(kind)
        return cls.BRIDGE_TYPES[kind]

    @classmethod
    def param_to_bridge(cls, param: Parameter) -> str:
        return cls.to_bridge(param.type_annotation, cls.is_nullable_param(param))

    @classmethod
    def to_cxx(cls, annotation: TypeAnnotation, nullable: bool = False) -> str:
        """Convert annotation to the C++ type seen by the bridge object"""
        inner, was_nullable = unwrap_nullable(annotation)
        kind = _kind(inner)
        if nullable or was_nullable:
            return f'bridging::{cls._nullable_mirror(kind)}'
        return cls.CXX_TYPES[kind]

    @classmethod
    def param_to_cxx(cls, param: Parameter) -> str:
        return cls.to_cxx(param.type_annotation, cls.is_nullable_param(param))

    @classmethod
    def nullable_mirrors(cls, schemas) -> list[str]:
        """Nullable mirror kinds used anywhere, in first-seen order"""
        found = []
        for schema in schemas:
            for method in schema.methods:
                for slot, annotation, nullable in cls._method_slots(method):
                    with type_context(module=schema.module_name, method=method.name, param=slot):
                        kind = cls.kind(annotation)
                    if nullable and kind not in found:
                        found.append(kind)
        return found

    @classmethod
    def _method_slots(cls, method: FunctionSpec):
        for param in method.params:
            yield param.name, param.type_annotation, cls.is_nullable_param(param)
        yield 'return', method.return_type, isinstance(method.return_type, NullableType)

    @classmethod
    def to_ffi(cls, annotation: TypeAnnotation, platform: Platform) -> str:
        """FFI parameter type; nullable layers resolve to the innermost type"""
        return cls.FFI_TYPES[platform][cls.kind(annotation)]

    @classmethod
    def to_ffi_return(cls, annotation: TypeAnnotation, platform: Platform) -> str:
        kind = cls.kind(annotation)
        return cls.FFI_RETURN_TYPES.get(platform, {}).get(kind, cls.FFI_TYPES[platform][kind])

    @classmethod
    def ffi_failure_value(cls, annotation: TypeAnnotation) -> str:
        return cls.FFI_FAILURE_VALUES[cls.kind(annotation)]

    @classmethod
    def to_kotlin(cls, annotation: TypeAnnotation, nullable: bool = False) -> str:
        inner, was_nullable = unwrap_nullable(annotation)
        kind = _kind(inner)
        # Only references can carry null across the JNI boundary
        if kind == 'string' and (nullable or was_nullable):
            return 'String?'
        return cls.KOTLIN_TYPES[kind]

    @classmethod
    def to_c(cls, annotation: TypeAnnotation, is_return: bool = False) -> str:
        kind = cls.kind(annotation)
        if is_return:
            return cls.C_RETURN_TYPES.get(kind, cls.C_TYPES[kind])
        return cls.C_TYPES[kind]

    @classmethod
    def interop_info(cls, annotation: TypeAnnotation, platform: Platform) -> InteropInfo:
        """Marshalling metadata; only strings need conversion functions"""
        if cls.kind(annotation) != 'string':
            return InteropInfo.none()
        return InteropInfo(
            import_module=f'craby_core::{platform.value}::interop::string::*',
            from_ffi_fn='String::from_native',
            to_ffi_fn='to_native',
        )

    @classmethod
    def needs_interop(cls, method: FunctionSpec, platform: Platform) -> bool:
        annotations = [p.type_annotation for p in method.params] + [method.return_type]
        return any(cls.interop_info(a, platform).required for a in annotations)

    @classmethod
    def interop_imports(cls, schema: Schema, platform: Platform) -> list[str]:
        """Import lines needed by one schema's FFI shims, deduplicated in first-seen order"""
        imports = []
        for method in schema.methods:
            with type_context(module=schema.module_name, method=method.name):
                annotations = [p.type_annotation for p in method.params] + [method.return_type]
                for annotation in annotations:
                    info = cls.interop_info(annotation, platform)
                    if info.import_module and info.import_module not in imports:
                        imports.append(info.import_module)
        return imports
