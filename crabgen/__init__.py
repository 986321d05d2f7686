"""
Native Module Binding Generator Package

Reads module schemas and generates:
  1. Native bridge (cxx bridge + C++ objects exposed to the JS runtime)
  2. Host bindings (Rust traits, glue modules and implementation stubs)
  3. Android JNI layer
  4. iOS C ABI layer
"""

from .types import (
    CodegenContext, FunctionSpec, GenerateResult, InteropInfo, Parameter,
    Platform, Schema, Signal,
)
from .errors import CodegenError, ConfigError, SchemaError, UnsupportedTypeError
from .parser import SchemaParser
from .type_mapper import TypeMapper
from .bridge_generator import BridgeGenerator
from .host_generator import HostGenerator
from .android_generator import AndroidGenerator
from .ios_generator import IosGenerator
from .generator import CodeGenerator
from .hashing import context_hash, schema_hash

__version__ = '0.1.0'

__all__ = [
    'CodegenContext', 'FunctionSpec', 'GenerateResult', 'InteropInfo',
    'Parameter', 'Platform', 'Schema', 'Signal',
    'CodegenError', 'ConfigError', 'SchemaError', 'UnsupportedTypeError',
    'SchemaParser', 'TypeMapper',
    'BridgeGenerator', 'HostGenerator', 'AndroidGenerator', 'IosGenerator',
    'CodeGenerator', 'schema_hash', 'context_hash',
]
