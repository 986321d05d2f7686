from __future__ import annotations

import pytest

from crabgen.common_generator import GENERATED_COMMENT
from crabgen.errors import DuplicateSymbolError
from crabgen.ios_generator import IosGenerator
from crabgen.types import NumberType, Schema, StringType

from conftest import make_context, method


def _by_name(results):
    return {result.path.name: result for result in results}


def test_artifact_locations(ctx):
    paths = {r.path.relative_to(ctx.root).as_posix() for r in IosGenerator().generate(ctx)}

    assert paths == {
        "crates/ios/src/ffi/my_test_module.rs",
        "crates/ios/src/lib.rs",
        "ios/include/my_app.h",
        "ios/MyAppModuleProvider.mm",
    }


def test_c_abi_export(tmp_path):
    schema = Schema(
        module_name="MyModule",
        methods=(method("multiply", [("a", NumberType()), ("b", StringType())], NumberType()),),
    )
    ctx = make_context(tmp_path, schema, project_name="lib")

    shim = _by_name(IosGenerator().generate(ctx))["my_module.rs"].content

    assert "#[no_mangle]\npub extern \"C\" fn multiply(a: c_double, b: *const c_char) -> c_double {" in shim
    assert "    let b = match String::from_native(b) {" in shim
    assert 'Err(err) => panic!("Invalid argument `b` of `multiply`: {:?}", err),' in shim
    assert shim.index("String::from_native(b)") < shim.index("lib::my_module::multiply(a, b)")
    assert "use std::os::raw::*;" in shim
    assert "use craby_core::ios::interop::string::*;" in shim


def test_string_returns_are_owned(ctx):
    shim = _by_name(IosGenerator().generate(ctx))["my_test_module.rs"].content

    assert 'pub extern "C" fn string_method(arg: *const c_char) -> *mut c_char {' in shim
    assert "    match ret.to_native() {" in shim
    assert 'pub extern "C" fn nullable_method(arg: c_double) -> *mut c_char {' in shim
    assert "    None => std::ptr::null_mut()," in shim


def test_string_returns_match_mut_signature(ctx):
    shim = _by_name(IosGenerator().generate(ctx))["my_test_module.rs"].content
    string_fn = shim[shim.index("fn string_method"):shim.index("fn boolean_method")]
    nullable_fn = shim[shim.index("fn nullable_method"):shim.index("fn optional_method")]

    assert "    Ok(val) => val.cast_mut()," in string_fn
    assert "        Ok(val) => val.cast_mut()," in nullable_fn


def test_string_arguments_are_not_cast(ctx):
    shim = _by_name(IosGenerator().generate(ctx))["my_test_module.rs"].content

    assert shim.count("cast_mut()") == 2


def test_lib_rs_exports_free_function(ctx):
    lib_rs = _by_name(IosGenerator().generate(ctx))["lib.rs"].content

    assert 'pub extern "C" fn craby_free_string(ptr: *mut c_char) {' in lib_rs
    assert "drop(CString::from_raw(ptr));" in lib_rs
    assert "pub mod ffi {\n    pub mod my_test_module;\n}" in lib_rs


def test_c_header(ctx):
    header = _by_name(IosGenerator().generate(ctx))["my_app.h"].content

    assert header.startswith("#ifndef MY_APP_H\n#define MY_APP_H\n")
    assert "double numeric_method(double arg);" in header
    assert "char* string_method(const char* arg);" in header
    assert "bool boolean_method(bool arg);" in header
    assert "void trigger_signal(void);" in header
    assert "void craby_free_string(char* ptr);" in header


def test_provider_registers_modules(ctx):
    provider = _by_name(IosGenerator().generate(ctx))["MyAppModuleProvider.mm"].content

    assert "@implementation MyAppModuleProvider" in provider
    assert '#import "CxxMyTestModuleModule.hpp"' in provider
    assert "craby::myapp::modules::CxxMyTestModuleModule::dataPath = dataPath;" in provider
    assert "std::make_shared<craby::myapp::modules::CxxMyTestModuleModule>(jsInvoker);" in provider


def test_duplicate_symbols_across_modules(tmp_path, multiply_schema):
    other = Schema(
        module_name="OtherModule",
        methods=(method("multiply", [("x", NumberType())], NumberType()),),
    )
    ctx = make_context(tmp_path, multiply_schema, other)

    with pytest.raises(DuplicateSymbolError) as excinfo:
        IosGenerator().generate(ctx)

    assert excinfo.value.context == {"module": "OtherModule", "method": "multiply", "previous": "MyModule"}


def test_method_cannot_shadow_free_function(tmp_path):
    schema = Schema(module_name="Strings", methods=(method("crabyFreeString"),))

    with pytest.raises(DuplicateSymbolError):
        IosGenerator().generate(make_context(tmp_path, schema))


def test_stale_provider_is_cleaned(ctx):
    ios = ctx.root / "ios"
    ios.mkdir()
    (ios / "OldAppModuleProvider.mm").write_text(f"// {GENERATED_COMMENT}\n")
    (ios / "AppDelegate.mm").write_text("#import \"AppDelegate.h\"\n")

    removed = IosGenerator().cleanup(ctx)

    assert [p.name for p in removed] == ["OldAppModuleProvider.mm"]
    assert (ios / "AppDelegate.mm").exists()


def test_c_keywords_are_not_used_as_parameter_names(tmp_path):
    schema = Schema(
        module_name="Keywords",
        methods=(method("pick", [("int", NumberType()), ("default", StringType()), ("class", NumberType())], NumberType()),),
    )
    ctx = make_context(tmp_path, schema)

    header = _by_name(IosGenerator().generate(ctx))["my_app.h"].content

    assert "double pick(double int_, const char* default_, double class_);" in header
