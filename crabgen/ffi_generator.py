"""FFI Generator - marshalling shims shared by the platform FFI layers"""

from pathlib import Path

from .common_generator import Generator, indent_str
from .naming import lib_crate_name, rs_ident, sanitize_str
from .type_mapper import TypeMapper, type_context
from .types import (
    CodegenContext, FunctionSpec, GenerateResult, NullableType, Platform,
    Schema, VoidType,
)


class FFIGenerator(Generator):
    """Per-method shims converting platform values to host calls and back.

    Subclasses supply the platform syntax: symbol names, leading
    parameters, conversion call shapes and how a conversion failure
    surfaces to the caller.
    """

    platform: Platform

    def crate_dir(self, ctx: CodegenContext) -> Path:
        raise NotImplementedError

    def ffi_module_path(self, ctx: CodegenContext, schema: Schema) -> Path:
        return self.crate_dir(ctx) / "src" / "ffi" / f"{sanitize_str(schema.module_name)}.rs"

    def stale_files(self, ctx: CodegenContext):
        return self._glob(self.crate_dir(ctx) / "src" / "ffi", "*.rs")

    def generate_crate_files(self, ctx: CodegenContext) -> list[GenerateResult]:
        results = []
        for schema in ctx.schemas:
            with type_context(module=schema.module_name):
                content = self.generate_ffi_module(ctx, schema)
            results.append(GenerateResult(self.ffi_module_path(ctx, schema), content))
        results.append(GenerateResult(self.crate_dir(ctx) / "src" / "lib.rs", self.generate_lib_rs(ctx)))
        return results

    def ffi_mod_decls(self, ctx: CodegenContext) -> list[str]:
        lines = ["pub mod ffi {"]
        for schema in ctx.schemas:
            lines.append(f"    pub mod {sanitize_str(schema.module_name)};")
        lines.append("}")
        return lines

    def generate_lib_rs(self, ctx: CodegenContext) -> str:
        raise NotImplementedError

    def generate_ffi_module(self, ctx: CodegenContext, schema: Schema) -> str:
        lines = self.base_imports(schema)
        lines.extend(f"use {module};" for module in TypeMapper.interop_imports(schema, self.platform))
        for method in schema.methods:
            with type_context(method=method.name):
                lines.extend(["", *self.ffi_function(ctx, schema, method)])
        return "\n".join(lines)

    # Platform hooks

    def base_imports(self, schema: Schema) -> list[str]:
        raise NotImplementedError

    def symbol_name(self, ctx: CodegenContext, schema: Schema, method: FunctionSpec) -> str:
        raise NotImplementedError

    def leading_params(self, needs_interop: bool) -> list[str]:
        return []

    def from_call(self, fn: str, value: str) -> str:
        raise NotImplementedError

    def to_call(self, value: str, fn: str) -> str:
        raise NotImplementedError

    def failure(self, what: str, failure_value: str) -> list[str]:
        """Arm body run when a conversion returns `Err(err)`"""
        raise NotImplementedError

    def returned_value(self, value: str) -> str:
        """Converted return value as the exported signature declares it"""
        return value

    # Shared algorithm

    def ffi_function(self, ctx: CodegenContext, schema: Schema, method: FunctionSpec) -> list[str]:
        needs_interop = TypeMapper.needs_interop(method, self.platform)
        params = self.leading_params(needs_interop)
        for param in method.params:
            with type_context(param=param.name):
                params.append(f"{rs_ident(param.name)}: {TypeMapper.to_ffi(param.type_annotation, self.platform)}")

        signature = f'pub extern "C" fn {self.symbol_name(ctx, schema, method)}({", ".join(params)})'
        if not isinstance(method.return_type, VoidType):
            signature += f" -> {TypeMapper.to_ffi_return(method.return_type, self.platform)}"

        ret_failure = TypeMapper.ffi_failure_value(method.return_type)
        body = []
        for param in method.params:
            body.extend(self._param_conversion(method, param, ret_failure))

        args = ", ".join(rs_ident(p.name) for p in method.params)
        call = f"{lib_crate_name(ctx.project_name)}::{sanitize_str(schema.module_name)}::{sanitize_str(method.name)}({args})"
        body.extend(self._return_conversion(method, call, ret_failure))

        return [
            "#[no_mangle]",
            f"{signature} {{",
            indent_str("\n".join(body)),
            "}",
        ]

    def _param_conversion(self, method: FunctionSpec, param, ret_failure: str) -> list[str]:
        name = rs_ident(param.name)
        info = TypeMapper.interop_info(param.type_annotation, self.platform)
        nullable = TypeMapper.is_nullable_param(param)
        what = f"argument `{param.name}` of `{method.name}`"

        if not info.required:
            return [f"let {name} = Some({name});"] if nullable else []

        converted = self.from_call(info.from_ffi_fn, name)
        if not nullable:
            return [
                f"let {name} = match {converted} {{",
                "    Ok(val) => val,",
                *indent_str("\n".join(self._err_arm(what, ret_failure, early_return=True))).split("\n"),
                "};",
            ]
        return [
            f"let {name} = if {name}.is_null() {{",
            "    None",
            "} else {",
            f"    match {converted} {{",
            "        Ok(val) => Some(val),",
            *indent_str("\n".join(self._err_arm(what, ret_failure, early_return=True)), 2).split("\n"),
            "    }",
            "};",
        ]

    def _return_conversion(self, method: FunctionSpec, call: str, ret_failure: str) -> list[str]:
        annotation = method.return_type
        if isinstance(annotation, VoidType):
            return [call]

        info = TypeMapper.interop_info(annotation, self.platform)
        nullable = isinstance(annotation, NullableType)
        if not info.required:
            return [f"{call}.unwrap_or_default()"] if nullable else [call]

        what = f"return value of `{method.name}`"
        converted = self.to_call("ret", info.to_ffi_fn)
        returned = self.returned_value("val")
        if not nullable:
            return [
                f"let ret = {call};",
                f"match {converted} {{",
                f"    Ok(val) => {returned},",
                *indent_str("\n".join(self._err_arm(what, ret_failure, early_return=False))).split("\n"),
                "}",
            ]
        return [
            f"let ret = {call};",
            "match ret {",
            f"    Some(ret) => match {converted} {{",
            f"        Ok(val) => {returned},",
            *indent_str("\n".join(self._err_arm(what, ret_failure, early_return=False)), 2).split("\n"),
            "    },",
            f"    None => {ret_failure},",
            "}",
        ]

    def _err_arm(self, what: str, failure_value: str, early_return: bool) -> list[str]:
        body = self.failure(what, f"return {failure_value};" if early_return else failure_value)
        if len(body) == 1:
            return [f"Err(err) => {body[0].rstrip(';')},"]
        return ["Err(err) => {", *("    " + line for line in body), "}"]
