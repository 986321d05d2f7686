"""Naming conventions shared by every emitter"""

import re

_WORD = re.compile(r'[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+')
_SEPARATORS = re.compile(r'[^A-Za-z0-9]+')


def split_words(value: str) -> list[str]:
    """Split an identifier into words on separators, case and digit boundaries"""
    words = []
    for segment in _SEPARATORS.split(value):
        words.extend(_WORD.findall(segment))
    return words


def pascal_case(value: str) -> str:
    return ''.join(w[:1].upper() + w[1:].lower() for w in split_words(value))


def camel_case(value: str) -> str:
    result = pascal_case(value)
    return result[:1].lower() + result[1:]


def snake_case(value: str) -> str:
    return '_'.join(w.lower() for w in split_words(value))


def kebab_case(value: str) -> str:
    return '-'.join(w.lower() for w in split_words(value))


def flat_case(value: str) -> str:
    return ''.join(w.lower() for w in split_words(value))


def sanitize_str(value: str) -> str:
    """Canonical identifier for modules and methods in generated sources.

    Every non-letter becomes a separator, then the result is snake-cased,
    so `my-module2` and `MyModule` both land on a valid Rust identifier.
    """
    return snake_case(re.sub(r'[^a-zA-Z]', '_', value))


def sanitized_name(value: str) -> str:
    """Lowercased name with non-alphanumerics replaced, used for library names"""
    return re.sub(r'[^a-z0-9]', '_', value.lower())


# Cross-file names. Every emitter derives names through these functions so
# a symbol referenced in one artifact always matches its definition in another.

def cxx_namespace(project_name: str) -> str:
    return f'craby::{flat_case(project_name)}'


def cxx_module_name(module_name: str) -> str:
    return f'Cxx{pascal_case(module_name)}Module'


def objc_provider_name(project_name: str) -> str:
    return f'{pascal_case(project_name)}ModuleProvider'


def impl_mod_name(module_name: str) -> str:
    return f'{snake_case(module_name)}_impl'


def impl_struct_name(module_name: str) -> str:
    return pascal_case(module_name)


def spec_trait_name(module_name: str) -> str:
    return f'{pascal_case(module_name)}Spec'


def signal_enum_name(module_name: str) -> str:
    return f'{pascal_case(module_name)}Signal'


def create_fn_name(module_name: str) -> str:
    return f'create_{sanitize_str(module_name)}'


def bridge_fn_name(module_name: str, method_name: str) -> str:
    return f'{sanitize_str(module_name)}_{sanitize_str(method_name)}'


def lib_crate_name(project_name: str) -> str:
    return sanitize_str(project_name)


def dest_lib_name(project_name: str) -> str:
    return f'lib{flat_case(project_name)}-prebuilt.a'


def cxx_lib_name(project_name: str) -> str:
    return f'cxx-{kebab_case(project_name)}'


def ios_header_name(project_name: str) -> str:
    return f'{lib_crate_name(project_name)}.h'


# JNI

def jni_escape(value: str) -> str:
    """Escape one JNI name component (class or method)"""
    out = []
    for ch in value:
        if ch == '_':
            out.append('_1')
        elif ch == ';':
            out.append('_2')
        elif ch == '[':
            out.append('_3')
        elif ch.isascii() and ch.isalnum():
            out.append(ch)
        else:
            out.append(f'_0{ord(ch):04x}')
    return ''.join(out)


def jni_class_name(module_name: str) -> str:
    return f'{pascal_case(module_name)}Module'


def jni_native_method_name(method_name: str) -> str:
    return f'native{pascal_case(method_name)}'


def rn_package_name(project_name: str) -> str:
    """Kotlin `BaseReactPackage` that loads the native library and sets the data path"""
    return f'{pascal_case(project_name)}Package'


def jni_prepare_module_name(module_name: str) -> str:
    return f'__craby{module_name}_JNI_prepare__'


def jni_fn_name(package_name: str, class_name: str, method_name: str) -> str:
    """Exported symbol for a static native method on `package_name.class_name`"""
    pkg = '_'.join(jni_escape(part) for part in package_name.split('.') if part)
    return f'Java_{pkg}_{jni_escape(class_name)}_{jni_escape(method_name)}'


RUST_KEYWORDS = frozenset({
    'as', 'async', 'await', 'box', 'break', 'const', 'continue', 'crate', 'dyn',
    'else', 'enum', 'extern', 'false', 'fn', 'for', 'if', 'impl', 'in', 'let',
    'loop', 'match', 'mod', 'move', 'mut', 'pub', 'ref', 'return', 'self',
    'static', 'struct', 'super', 'trait', 'true', 'type', 'unsafe', 'use',
    'where', 'while', 'yield',
})

# Names the generated shims bind themselves
SHIM_IDENTS = frozenset({'env', 'it_'})


def rs_ident(value: str) -> str:
    """Snake-case parameter name that is never a Rust keyword"""
    ident = snake_case(value) or '_arg'
    if ident in RUST_KEYWORDS or ident in SHIM_IDENTS:
        return f'{ident}_'
    if ident[0].isdigit():
        return f'_{ident}'
    return ident


# C and C++ keywords; the iOS header is included from both languages
C_KEYWORDS = frozenset({
    'auto', 'bool', 'break', 'case', 'char', 'class', 'const', 'continue',
    'default', 'delete', 'do', 'double', 'else', 'enum', 'explicit', 'extern',
    'false', 'float', 'for', 'friend', 'goto', 'if', 'inline', 'int', 'long',
    'mutable', 'namespace', 'new', 'operator', 'private', 'protected', 'public',
    'register', 'restrict', 'return', 'short', 'signed', 'sizeof', 'static',
    'struct', 'switch', 'template', 'this', 'throw', 'true', 'try', 'typedef',
    'typename', 'union', 'unsigned', 'using', 'virtual', 'void', 'volatile',
    'while',
})


def c_ident(value: str) -> str:
    """Parameter name for C declarations, suffixed when it is a C or C++ keyword"""
    ident = snake_case(value) or '_arg'
    if ident in C_KEYWORDS:
        return f'{ident}_'
    if ident[0].isdigit():
        return f'_{ident}'
    return ident


KOTLIN_KEYWORDS = frozenset({
    'as', 'break', 'class', 'continue', 'do', 'else', 'false', 'for', 'fun',
    'if', 'in', 'interface', 'is', 'null', 'object', 'package', 'return',
    'super', 'this', 'throw', 'true', 'try', 'typealias', 'typeof', 'val',
    'var', 'when', 'while',
})


def kotlin_ident(value: str) -> str:
    """Kotlin parameter name; hard keywords are escaped with backticks"""
    if value in KOTLIN_KEYWORDS:
        return f'`{value}`'
    return value
