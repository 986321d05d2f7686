from __future__ import annotations

import pytest

from crabgen.bridge_generator import BridgeGenerator
from crabgen.common_generator import GENERATED_COMMENT
from crabgen.errors import DuplicateSymbolError, SchemaError
from crabgen.types import NumberType, Schema, Signal

from conftest import make_context, method


def _by_name(results):
    return {result.path.name: result for result in results}


def test_artifacts(ctx):
    files = _by_name(BridgeGenerator().generate(ctx))

    assert set(files) == {
        "ffi.rs",
        "CxxMyTestModuleModule.hpp",
        "CxxMyTestModuleModule.cpp",
        "CrabyUtils.hpp",
        "bridging-generated.hpp",
        "CrabySignals.h",
    }
    assert all(result.overwrite for result in files.values())


def test_signals_header_only_when_signals_exist(tmp_path, multiply_schema):
    files = _by_name(BridgeGenerator().generate(make_context(tmp_path, multiply_schema)))

    assert "CrabySignals.h" not in files
    assert "SignalManager" not in files["ffi.rs"].content


def test_cxx_bridge_declarations(ctx):
    ffi_rs = _by_name(BridgeGenerator().generate(ctx))["ffi.rs"].content

    assert '#[cxx::bridge(namespace = "craby::myapp::bridging")]' in ffi_rs
    assert "        type MyTestModule;" in ffi_rs
    assert "        fn create_my_test_module(id: usize) -> Box<MyTestModule>;" in ffi_rs
    assert (
        "        fn my_test_module_numeric_method(it_: &mut MyTestModule, arg: f64) -> Result<f64>;"
    ) in ffi_rs
    assert '    #[namespace = "craby::myapp::signals"]' in ffi_rs


def test_bridge_functions_catch_failures(ctx):
    ffi_rs = _by_name(BridgeGenerator().generate(ctx))["ffi.rs"].content

    assert "std::panic::catch_unwind" in ffi_rs
    assert 'catch_panic("MyTestModule.numericMethod", || it_.numeric_method(arg))' in ffi_rs


def test_nullable_values_use_mirror_structs(ctx):
    ffi_rs = _by_name(BridgeGenerator().generate(ctx))["ffi.rs"].content

    assert "    struct NullableNumber {\n        null: bool,\n        val: f64,\n    }" in ffi_rs
    assert "    struct NullableString {" in ffi_rs
    assert "impl From<bridging::NullableNumber> for Option<f64> {" in ffi_rs
    assert (
        "catch_panic(\"MyTestModule.nullableMethod\", "
        "|| bridging::NullableString::from(it_.nullable_method(arg.into())))"
    ) in ffi_rs
    assert "it_.optional_method(label, count.into())" in ffi_rs


def test_module_class_lifecycle(ctx):
    files = _by_name(BridgeGenerator().generate(ctx))
    header = files["CxxMyTestModuleModule.hpp"].content
    impl = files["CxxMyTestModuleModule.cpp"].content

    assert "class JSI_EXPORT CxxMyTestModuleModule : public facebook::react::TurboModule {" in header
    assert 'static constexpr const char *kModuleName = "MyTestModule";' in header
    assert "std::atomic<bool> invalidated_{false};" in header

    assert "threadPool_(std::make_shared<utils::ThreadPool>(10))" in impl
    assert "if (invalidated_.exchange(true)) {" in impl
    assert "rust::Box<bridging::MyTestModule>::from_raw(ptr);" in impl
    assert "signals::getSignalManager().registerDelegate(" in impl
    assert "signals::getSignalManager().unregisterDelegate(" in impl
    assert "threadPool_->shutdown();" in impl


def test_method_map_and_arity(ctx):
    impl = _by_name(BridgeGenerator().generate(ctx))["CxxMyTestModuleModule.cpp"].content

    assert 'methodMap_["numericMethod"] = MethodMetadata{1, &CxxMyTestModuleModule::numericMethod};' in impl
    assert 'methodMap_["onSignal"] = MethodMetadata{1, &CxxMyTestModuleModule::onSignal};' in impl
    assert "if (count != 1) {" in impl
    assert "if (count < 1 || count > 2) {" in impl
    assert "utils::argAt(rt, args, count, 1)" in impl


def test_dispatch_translates_errors(ctx):
    impl = _by_name(BridgeGenerator().generate(ctx))["CxxMyTestModuleModule.cpp"].content

    assert "  } catch (const jsi::JSError &err) {\n    throw;" in impl
    assert "throw jsi::JSError(rt, utils::errorMessage(err));" in impl
    assert "auto ret = bridging::my_test_module_numeric_method(*it_, arg0);" in impl
    assert "bridging::my_test_module_trigger_signal(*it_);\n\n    return jsi::Value::undefined();" in impl


def test_listeners_snapshot_and_cleanup(ctx):
    files = _by_name(BridgeGenerator().generate(ctx))
    impl = files["CxxMyTestModuleModule.cpp"].content
    utils = files["CrabyUtils.hpp"].content

    assert "for (auto &listener : listeners_->snapshot(name)) {" in impl
    assert "callInvoker_->invokeAsync(" in impl
    assert 'listeners->remove("onSignal", id);' in impl
    assert "std::weak_ptr<utils::ListenerRegistry> registry" in impl

    assert "auto id = nextId_++;" in utils
    assert "class ThreadPool {" in utils
    assert "std::swap(tasks_, pending);" in utils


def test_bridging_header_covers_mirrors(ctx):
    header = _by_name(BridgeGenerator().generate(ctx))["bridging-generated.hpp"].content

    assert "struct Bridging<rust::String> {" in header
    assert "struct Bridging<rust::Vec<T>> {" in header
    assert "struct Bridging<craby::myapp::bridging::NullableNumber> {" in header
    assert "struct Bridging<craby::myapp::bridging::NullableString> {" in header
    assert "NullableBoolean" not in header


def test_stale_module_files_are_cleaned(ctx):
    cpp = ctx.root / "cpp"
    cpp.mkdir()
    stale = cpp / "CxxOldModule.cpp"
    stale.write_text(f"// {GENERATED_COMMENT}\n// old\n")
    keep = cpp / "CustomHelper.cpp"
    keep.write_text("// user code")

    removed = BridgeGenerator().cleanup(ctx)

    assert removed == [stale]
    assert not stale.exists()
    assert keep.exists()


def test_hand_written_module_is_not_cleaned(ctx):
    cpp = ctx.root / "cpp"
    cpp.mkdir()
    custom = cpp / "CxxLegacyModule.hpp"
    custom.write_text("#pragma once\n// written by hand\n")

    assert BridgeGenerator().cleanup(ctx) == []
    assert custom.exists()


def _generate(tmp_path, schema):
    return BridgeGenerator().generate(make_context(tmp_path, schema))


@pytest.mark.parametrize("name", ["invalidate", "emit", "get", "dataPath"])
def test_method_cannot_shadow_class_member(tmp_path, name):
    schema = Schema(module_name="Clash", methods=(method(name),))

    with pytest.raises(DuplicateSymbolError) as excinfo:
        _generate(tmp_path, schema)

    assert excinfo.value.context == {"module": "Clash", "method": name}


def test_method_and_signal_share_a_name(tmp_path):
    schema = Schema(module_name="Clash", methods=(method("onReady"),), signals=(Signal("onReady"),))

    with pytest.raises(DuplicateSymbolError) as excinfo:
        _generate(tmp_path, schema)

    assert excinfo.value.context == {"module": "Clash", "signal": "onReady", "previous": "onReady"}


def test_methods_that_collapse_to_one_rust_name(tmp_path):
    schema = Schema(
        module_name="Clash",
        methods=(method("getURL", returns=NumberType()), method("getUrl", returns=NumberType())),
    )

    with pytest.raises(DuplicateSymbolError) as excinfo:
        _generate(tmp_path, schema)

    assert excinfo.value.context["previous"] == "getURL"


@pytest.mark.parametrize("name", ["delete", "type"])
def test_reserved_words_are_rejected(tmp_path, name):
    schema = Schema(module_name="Words", methods=(method(name),))

    with pytest.raises(SchemaError):
        _generate(tmp_path, schema)
