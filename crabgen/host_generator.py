"""Host Generator - Rust traits, glue modules and implementation stubs"""

from .common_generator import Generator, indent_str
from .hashing import context_hash, hash_header
from .naming import (
    impl_mod_name, impl_struct_name, pascal_case, rs_ident, sanitize_str,
    signal_enum_name, spec_trait_name,
)
from .paths import crate_src_dir
from .type_mapper import TypeMapper, type_context
from .types import CodegenContext, FunctionSpec, GenerateResult, Schema, VoidType


class HostGenerator(Generator):
    """Generates the host-language binding layer of the library crate"""

    name = "host"

    def generate(self, ctx: CodegenContext) -> list[GenerateResult]:
        src = crate_src_dir(ctx.root)
        results = [
            GenerateResult(src / "lib.rs", self.generate_lib_rs(ctx)),
            GenerateResult(src / "generated.rs", self.generate_generated_rs(ctx)),
        ]
        for schema in ctx.schemas:
            results.append(GenerateResult(
                src / f"{impl_mod_name(schema.module_name)}.rs",
                self.generate_impl_stub(schema),
                overwrite=False,
            ))
        self.logger.debug("Generated %d host files", len(results))
        return results

    def generate_lib_rs(self, ctx: CodegenContext) -> str:
        lines = [
            "#[rustfmt::skip]",
            "pub(crate) mod ffi;",
            "#[rustfmt::skip]",
            "pub(crate) mod generated;",
            "",
        ]
        for schema in ctx.schemas:
            lines.append(f"pub(crate) mod {impl_mod_name(schema.module_name)};")
        lines.append("")
        for schema in ctx.schemas:
            lines.append(f"pub use generated::{sanitize_str(schema.module_name)};")
        return "\n".join(lines)

    def generate_generated_rs(self, ctx: CodegenContext) -> str:
        """Traits, signal enums and glue modules for every schema, in declaration order"""
        lines = [hash_header(context_hash(ctx)), ""]
        if any(schema.signals for schema in ctx.schemas):
            lines.extend(["use crate::ffi::bridging::get_signal_manager;", ""])

        for schema in ctx.schemas:
            if schema.signals:
                lines.extend(self._signal_enum(schema))
                lines.append("")
            lines.extend(self._spec_trait(schema))
            lines.append("")
            lines.extend(self._glue_module(schema))
            lines.append("")

        return "\n".join(lines).rstrip("\n")

    def _signal_enum(self, schema: Schema) -> list[str]:
        lines = [f"pub enum {signal_enum_name(schema.module_name)} {{"]
        for signal in schema.signals:
            lines.append(f"    {pascal_case(signal.name)},")
        lines.append("}")
        return lines

    def _spec_trait(self, schema: Schema) -> list[str]:
        lines = [
            f"pub trait {spec_trait_name(schema.module_name)} {{",
            "    fn new(id: usize) -> Self;",
            "    fn id(&self) -> usize;",
        ]
        if schema.signals:
            enum_name = signal_enum_name(schema.module_name)
            lines.extend([
                f"    fn emit(&self, signal: {enum_name}) {{",
                "        let name = match signal {",
            ])
            for signal in schema.signals:
                lines.append(f'            {enum_name}::{pascal_case(signal.name)} => "{signal.name}",')
            lines.extend([
                "        };",
                "        get_signal_manager().emit(self.id(), name);",
                "    }",
            ])
        for method in schema.methods:
            with type_context(module=schema.module_name, method=method.name):
                lines.append(f"    {self.method_signature(method)};")
        lines.append("}")
        return lines

    @staticmethod
    def method_signature(method: FunctionSpec, receiver: str = "&mut self") -> str:
        """`fn name(&mut self, a: T) -> R` as declared on the trait"""
        params = [receiver] if receiver else []
        for param in method.params:
            with type_context(param=param.name):
                params.append(f"{rs_ident(param.name)}: {TypeMapper.param_to_host(param)}")
        signature = f"fn {sanitize_str(method.name)}({', '.join(params)})"
        if not isinstance(method.return_type, VoidType):
            signature += f" -> {TypeMapper.to_host(method.return_type)}"
        return signature

    def _glue_module(self, schema: Schema) -> list[str]:
        """Free functions the platform FFI crates call, one per method"""
        struct = impl_struct_name(schema.module_name)
        lines = [
            f"pub mod {sanitize_str(schema.module_name)} {{",
            f"    use super::{spec_trait_name(schema.module_name)};",
            f"    use crate::{impl_mod_name(schema.module_name)}::{struct};",
            "    use std::sync::{Mutex, MutexGuard, OnceLock};",
            "",
            f"    fn impls() -> MutexGuard<'static, {struct}> {{",
            f"        static INSTANCE: OnceLock<Mutex<{struct}>> = OnceLock::new();",
            "        INSTANCE",
            f"            .get_or_init(|| Mutex::new({struct}::new(0)))",
            "            .lock()",
            "            .unwrap_or_else(|err| err.into_inner())",
            "    }",
        ]
        for method in schema.methods:
            signature = self.method_signature(method, receiver="")
            args = ", ".join(rs_ident(p.name) for p in method.params)
            body = f"impls().{sanitize_str(method.name)}({args})"
            lines.extend([
                "",
                f"    pub {signature} {{",
                f"        {body}",
                "    }",
            ])
        lines.append("}")
        return lines

    def generate_impl_stub(self, schema: Schema) -> str:
        """Scaffold the user fills in; written once and never overwritten"""
        struct = impl_struct_name(schema.module_name)
        lines = [
            "use crate::generated::*;",
            "",
            f"pub struct {struct} {{",
            "    id: usize,",
            "}",
            "",
            f"impl {spec_trait_name(schema.module_name)} for {struct} {{",
            "    fn new(id: usize) -> Self {",
            f"        {struct} {{ id }}",
            "    }",
            "",
            "    fn id(&self) -> usize {",
            "        self.id",
            "    }",
        ]
        for method in schema.methods:
            with type_context(module=schema.module_name, method=method.name):
                signature = self.method_signature(method)
            lines.extend([
                "",
                f"    {signature} {{",
                indent_str("unimplemented!();", 2),
                "    }",
            ])
        lines.append("}")
        return "\n".join(lines)
