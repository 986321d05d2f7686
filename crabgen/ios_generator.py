"""iOS Generator - C ABI exports, C header and module provider"""

from pathlib import Path

from .errors import DuplicateSymbolError
from .ffi_generator import FFIGenerator
from .naming import (
    c_ident, cxx_module_name, cxx_namespace, ios_header_name, lib_crate_name,
    objc_provider_name, sanitize_str,
)
from .paths import ios_base_path, ios_crate_dir
from .type_mapper import TypeMapper, type_context
from .types import CodegenContext, FunctionSpec, GenerateResult, Platform, Schema, VoidType

FREE_STRING_FN = "craby_free_string"


class IosGenerator(FFIGenerator):
    """Generates the C ABI layer"""

    name = "ios"
    platform = Platform.IOS

    def crate_dir(self, ctx: CodegenContext) -> Path:
        return ios_crate_dir(ctx.root)

    def generate(self, ctx: CodegenContext) -> list[GenerateResult]:
        self.check_symbols(ctx)
        ios_dir = ios_base_path(ctx.root)
        results = self.generate_crate_files(ctx)
        results.append(GenerateResult(ios_dir / "include" / ios_header_name(ctx.project_name), self.generate_c_header(ctx)))
        results.append(GenerateResult(ios_dir / f"{objc_provider_name(ctx.project_name)}.mm", self.generate_provider(ctx)))
        self.logger.debug("Generated %d ios files", len(results))
        return results

    def stale_files(self, ctx: CodegenContext):
        return super().stale_files(ctx) + self._glob(ios_base_path(ctx.root), "*.mm")

    def check_symbols(self, ctx: CodegenContext):
        """C has one flat namespace; two modules exporting the same name cannot link"""
        owners = {FREE_STRING_FN: None}
        for schema in ctx.schemas:
            for method in schema.methods:
                symbol = sanitize_str(method.name)
                if symbol in owners:
                    raise DuplicateSymbolError(
                        f"Exported symbol `{symbol}` is defined more than once",
                        {'module': schema.module_name, 'method': method.name, 'previous': owners[symbol]},
                    )
                owners[symbol] = schema.module_name

    # Rust shims

    def base_imports(self, schema: Schema) -> list[str]:
        return ["use std::os::raw::*;"]

    def symbol_name(self, ctx: CodegenContext, schema: Schema, method: FunctionSpec) -> str:
        return sanitize_str(method.name)

    def from_call(self, fn: str, value: str) -> str:
        return f"{fn}({value})"

    def to_call(self, value: str, fn: str) -> str:
        return f"{value}.{fn}()"

    def failure(self, what: str, failure_value: str) -> list[str]:
        # A panic cannot unwind through `extern "C"`; the process aborts with the message
        return [f'panic!("Invalid {what}: {{:?}}", err)']

    def returned_value(self, value: str) -> str:
        # Strings leave as `*mut c_char` so the caller can hand them back to `craby_free_string`
        return f"{value}.cast_mut()"

    def generate_lib_rs(self, ctx: CodegenContext) -> str:
        lines = [
            "use std::ffi::CString;",
            "use std::os::raw::c_char;",
            "",
            *self.ffi_mod_decls(ctx),
            "",
            "/// Release a string returned by any exported function",
            "#[no_mangle]",
            f'pub extern "C" fn {FREE_STRING_FN}(ptr: *mut c_char) {{',
            "    if ptr.is_null() {",
            "        return;",
            "    }",
            "    unsafe {",
            "        drop(CString::from_raw(ptr));",
            "    }",
            "}",
        ]
        return "\n".join(lines)

    # Native side

    def generate_c_header(self, ctx: CodegenContext) -> str:
        guard = f"{lib_crate_name(ctx.project_name).upper()}_H"
        lines = [
            f"#ifndef {guard}",
            f"#define {guard}",
            "",
            "#include <stdbool.h>",
            "",
            "#ifdef __cplusplus",
            'extern "C" {',
            "#endif",
            "",
        ]
        for schema in ctx.schemas:
            lines.append(f"// {schema.module_name}")
            for method in schema.methods:
                with type_context(module=schema.module_name, method=method.name):
                    lines.append(self._c_declaration(method))
            lines.append("")
        lines.extend([
            f"void {FREE_STRING_FN}(char* ptr);",
            "",
            "#ifdef __cplusplus",
            "}",
            "#endif",
            "",
            f"#endif // {guard}",
        ])
        return "\n".join(lines)

    def _c_declaration(self, method: FunctionSpec) -> str:
        params = []
        for param in method.params:
            with type_context(param=param.name):
                params.append(f"{TypeMapper.to_c(param.type_annotation)} {c_ident(param.name)}")
        if isinstance(method.return_type, VoidType):
            ret = "void"
        else:
            ret = TypeMapper.to_c(method.return_type, is_return=True)
        return f"{ret} {sanitize_str(method.name)}({', '.join(params) or 'void'});"

    def generate_provider(self, ctx: CodegenContext) -> str:
        namespace = cxx_namespace(ctx.project_name)
        provider = objc_provider_name(ctx.project_name)
        lines = [
            "#import <Foundation/Foundation.h>",
            "#import <ReactCommon/CxxTurboModuleUtils.h>",
            "",
        ]
        for schema in ctx.schemas:
            lines.append(f'#import "{cxx_module_name(schema.module_name)}.hpp"')
        lines.extend([
            "",
            f"@interface {provider} : NSObject",
            "@end",
            "",
            f"@implementation {provider}",
            "",
            "+ (void)load {",
            "  std::string dataPath([[self resolveDataPath] UTF8String]);",
        ])
        for schema in ctx.schemas:
            cls = f"{namespace}::modules::{cxx_module_name(schema.module_name)}"
            lines.extend([
                f"  {cls}::dataPath = dataPath;",
                "  facebook::react::registerCxxModuleToGlobalModuleMap(",
                f"      std::string({cls}::kModuleName),",
                "      [](std::shared_ptr<facebook::react::CallInvoker> jsInvoker) {",
                f"        return std::make_shared<{cls}>(jsInvoker);",
                "      });",
            ])
        lines.extend([
            "}",
            "",
            "+ (NSString *)resolveDataPath {",
            "  NSArray<NSString *> *paths =",
            "      NSSearchPathForDirectoriesInDomains(NSApplicationSupportDirectory, NSUserDomainMask, YES);",
            '  NSString *path = [paths.firstObject stringByAppendingPathComponent:@"craby"];',
            "  [[NSFileManager defaultManager] createDirectoryAtPath:path",
            "                            withIntermediateDirectories:YES",
            "                                             attributes:nil",
            "                                                  error:nil];",
            "  return path;",
            "}",
            "",
            "@end",
        ])
        return "\n".join(lines)
