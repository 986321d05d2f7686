from __future__ import annotations

from crabgen.hashing import context_hash, read_hash
from crabgen.host_generator import HostGenerator

from conftest import make_context


def _by_name(results):
    return {result.path.name: result for result in results}


def test_glue_delegates_with_same_argument_order(tmp_path, multiply_schema):
    ctx = make_context(tmp_path, multiply_schema)

    generated = _by_name(HostGenerator().generate(ctx))["generated.rs"].content

    assert "pub mod my_module {" in generated
    assert (
        "    pub fn multiply(a: f64, b: f64) -> f64 {\n"
        "        impls().multiply(a, b)\n"
        "    }"
    ) in generated


def test_trait_declares_lifecycle_and_methods(tmp_path, multiply_schema):
    ctx = make_context(tmp_path, multiply_schema)

    generated = _by_name(HostGenerator().generate(ctx))["generated.rs"].content

    assert "pub trait MyModuleSpec {" in generated
    assert "    fn new(id: usize) -> Self;" in generated
    assert "    fn id(&self) -> usize;" in generated
    assert "    fn multiply(&mut self, a: f64, b: f64) -> f64;" in generated
    assert "emit" not in generated


def test_signals_produce_enum_and_emit(ctx):
    generated = _by_name(HostGenerator().generate(ctx))["generated.rs"].content

    assert "pub enum MyTestModuleSignal {\n    OnSignal,\n    OnProgress,\n}" in generated
    assert '            MyTestModuleSignal::OnSignal => "onSignal",' in generated
    assert "get_signal_manager().emit(self.id(), name);" in generated
    assert "use crate::ffi::bridging::get_signal_manager;" in generated


def test_nullable_and_optional_params(ctx):
    generated = _by_name(HostGenerator().generate(ctx))["generated.rs"].content

    assert "fn nullable_method(&mut self, arg: Option<f64>) -> Option<String>;" in generated
    assert "fn optional_method(&mut self, label: String, count: Option<f64>) -> f64;" in generated
    assert "fn trigger_signal(&mut self);" in generated
    assert "Option<Option" not in generated


def test_generated_rs_embeds_context_hash(ctx):
    generated = _by_name(HostGenerator().generate(ctx))["generated.rs"].content

    assert read_hash(generated) == context_hash(ctx)


def test_impl_stub_is_not_overwritten(ctx):
    stub = _by_name(HostGenerator().generate(ctx))["my_test_module_impl.rs"]

    assert stub.overwrite is False
    assert "impl MyTestModuleSpec for MyTestModule {" in stub.content
    assert "unimplemented!();" in stub.content
    assert "        MyTestModule { id }" in stub.content


def test_lib_rs_declares_modules(ctx):
    lib_rs = _by_name(HostGenerator().generate(ctx))["lib.rs"].content

    assert "pub(crate) mod ffi;" in lib_rs
    assert "pub(crate) mod my_test_module_impl;" in lib_rs
    assert "pub use generated::my_test_module;" in lib_rs
