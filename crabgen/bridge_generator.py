"""Bridge Generator - cxx bridge and the C++ object exposed to the JS runtime"""

from .common_generator import Generator
from .errors import DuplicateSymbolError, SchemaError
from .naming import (
    C_KEYWORDS, RUST_KEYWORDS, bridge_fn_name, create_fn_name, cxx_module_name,
    cxx_namespace, impl_mod_name, impl_struct_name, rs_ident, sanitize_str,
)
from .paths import crate_src_dir, cxx_bridge_include_dir, cxx_dir
from .type_mapper import TypeMapper, type_context
from .types import CodegenContext, FunctionSpec, GenerateResult, NullableType, Schema, VoidType

THREAD_POOL_SIZE = 10

# Members of the generated TurboModule class and its base that a
# per-method static dispatch function must not shadow
RESERVED_MEMBERS = frozenset({
    "kModuleName", "dataPath", "invalidate", "emit",
    "callInvoker_", "module_", "listeners_", "threadPool_", "invalidated_",
    "get", "set", "getPropertyNames", "methodMap_", "jsInvoker_", "name_",
})

NULLABLE_DEFAULTS = {
    'number': ('f64', 'double', '0.0'),
    'string': ('String', 'rust::String', 'rust::String()'),
    'boolean': ('bool', 'bool', 'false'),
}


def namespace_open(namespace: str) -> list[str]:
    return [f"namespace {part} {{" for part in namespace.split("::")]


def namespace_close(namespace: str) -> list[str]:
    return [f"}} // namespace {part}" for part in reversed(namespace.split("::"))]


class BridgeGenerator(Generator):
    """Generates the native bridge between the host crate and the JS runtime"""

    name = "bridge"

    def generate(self, ctx: CodegenContext) -> list[GenerateResult]:
        for schema in ctx.schemas:
            self.check_members(schema)
        cpp = cxx_dir(ctx.root)
        results = [GenerateResult(crate_src_dir(ctx.root) / "ffi.rs", self.generate_ffi_rs(ctx))]
        for schema in ctx.schemas:
            cls = cxx_module_name(schema.module_name)
            results.append(GenerateResult(cpp / f"{cls}.hpp", self.generate_module_header(ctx, schema)))
            results.append(GenerateResult(cpp / f"{cls}.cpp", self.generate_module_impl(ctx, schema)))
        results.append(GenerateResult(cpp / "CrabyUtils.hpp", self.generate_utils_header(ctx)))
        results.append(GenerateResult(cpp / "bridging-generated.hpp", self.generate_bridging_header(ctx)))
        if self._has_signals(ctx):
            results.append(GenerateResult(
                cxx_bridge_include_dir(ctx.root) / "CrabySignals.h",
                self.generate_signals_header(ctx),
            ))
        self.logger.debug("Generated %d bridge files", len(results))
        return results

    def stale_files(self, ctx: CodegenContext):
        cpp = cxx_dir(ctx.root)
        return self._glob(cpp, "Cxx*Module.cpp") + self._glob(cpp, "Cxx*Module.hpp")

    def check_members(self, schema: Schema):
        """Methods and signals become static members of one C++ class and functions of one Rust module"""
        cls = cxx_module_name(schema.module_name)
        cxx_owners = {}
        rust_owners = {}
        members = [("method", m.name) for m in schema.methods] + [("signal", s.name) for s in schema.signals]
        for kind, name in members:
            context = {'module': schema.module_name, kind: name}
            if name in RESERVED_MEMBERS or name == cls:
                raise DuplicateSymbolError(f"`{name}` clashes with a member of {cls}", context)
            if name in C_KEYWORDS or sanitize_str(name) in RUST_KEYWORDS:
                raise SchemaError(f"`{name}` is a reserved word in generated code", context)
            previous = cxx_owners.get(name)
            if kind == "method" and previous is None:
                previous = rust_owners.get(sanitize_str(name))
            if previous is not None:
                raise DuplicateSymbolError(f"`{name}` is defined more than once", dict(context, previous=previous))
            cxx_owners[name] = name
            if kind == "method":
                rust_owners[sanitize_str(name)] = name

    @staticmethod
    def _has_signals(ctx: CodegenContext) -> bool:
        return any(schema.signals for schema in ctx.schemas)

    # Rust side

    def generate_ffi_rs(self, ctx: CodegenContext) -> str:
        namespace = cxx_namespace(ctx.project_name)
        mirrors = TypeMapper.nullable_mirrors(ctx.schemas)

        lines = ["use crate::generated::*;"]
        for schema in ctx.schemas:
            lines.append(f"use crate::{impl_mod_name(schema.module_name)}::*;")
        lines.extend([
            "",
            f'#[cxx::bridge(namespace = "{namespace}::bridging")]',
            "pub mod bridging {",
        ])

        for kind in mirrors:
            rust_type = NULLABLE_DEFAULTS[kind][0]
            lines.extend([
                f"    struct {TypeMapper.NULLABLE_MIRRORS[kind]} {{",
                "        null: bool,",
                f"        val: {rust_type},",
                "    }",
                "",
            ])

        lines.append('    extern "Rust" {')
        for i, schema in enumerate(ctx.schemas):
            struct = impl_struct_name(schema.module_name)
            if i:
                lines.append("")
            lines.extend([
                f"        type {struct};",
                "",
                f"        fn {create_fn_name(schema.module_name)}(id: usize) -> Box<{struct}>;",
            ])
            for method in schema.methods:
                with type_context(module=schema.module_name, method=method.name):
                    lines.append(f"        {self._bridge_signature(schema, method, bridge=True)};")
        lines.append("    }")

        if self._has_signals(ctx):
            lines.extend([
                "",
                f'    #[namespace = "{namespace}::signals"]',
                '    unsafe extern "C++" {',
                '        include!("CrabySignals.h");',
                "",
                "        type SignalManager;",
                "",
                "        fn emit(self: &SignalManager, id: usize, name: &str);",
                "",
                '        #[rust_name = "get_signal_manager"]',
                "        fn getSignalManager() -> &'static SignalManager;",
                "    }",
            ])
        lines.extend(["}", ""])

        for kind in mirrors:
            lines.extend(self._nullable_conversions(kind))
            lines.append("")

        lines.extend([
            "fn catch_panic<T, F: FnOnce() -> T>(label: &str, f: F) -> Result<T, anyhow::Error> {",
            "    std::panic::catch_unwind(std::panic::AssertUnwindSafe(f)).map_err(|err| {",
            "        let reason = err",
            "            .downcast_ref::<&str>()",
            "            .map(|s| s.to_string())",
            "            .or_else(|| err.downcast_ref::<String>().cloned())",
            '            .unwrap_or_else(|| "unknown panic".to_string());',
            '        anyhow::anyhow!("{}: {}", label, reason)',
            "    })",
            "}",
        ])

        for schema in ctx.schemas:
            struct = impl_struct_name(schema.module_name)
            lines.extend([
                "",
                f"fn {create_fn_name(schema.module_name)}(id: usize) -> Box<{struct}> {{",
                f"    Box::new({struct}::new(id))",
                "}",
            ])
            for method in schema.methods:
                lines.extend(["", *self._bridge_fn(schema, method)])

        return "\n".join(lines)

    def _bridge_signature(self, schema: Schema, method: FunctionSpec, bridge: bool) -> str:
        struct = impl_struct_name(schema.module_name)
        params = [f"it_: &mut {struct}"]
        for param in method.params:
            with type_context(param=param.name):
                params.append(f"{rs_ident(param.name)}: {TypeMapper.param_to_bridge(param)}")
        ret = TypeMapper.to_bridge(method.return_type)
        if bridge:
            ret = f"Result<{ret}>"
        else:
            ret = f"Result<{ret}, anyhow::Error>"
        return f"fn {bridge_fn_name(schema.module_name, method.name)}({', '.join(params)}) -> {ret}"

    def _bridge_fn(self, schema: Schema, method: FunctionSpec) -> list[str]:
        args = []
        for param in method.params:
            name = rs_ident(param.name)
            args.append(f"{name}.into()" if TypeMapper.is_nullable_param(param) else name)
        call = f"it_.{sanitize_str(method.name)}({', '.join(args)})"
        if isinstance(method.return_type, NullableType):
            mirror = TypeMapper.to_bridge(method.return_type)
            call = f"bridging::{mirror}::from({call})"
        label = f"{schema.module_name}.{method.name}"
        return [
            f"{self._bridge_signature(schema, method, bridge=False)} {{",
            f'    catch_panic("{label}", || {call})',
            "}",
        ]

    def _nullable_conversions(self, kind: str) -> list[str]:
        mirror = TypeMapper.NULLABLE_MIRRORS[kind]
        rust_type = NULLABLE_DEFAULTS[kind][0]
        default = "String::new()" if kind == "string" else NULLABLE_DEFAULTS[kind][2]
        return [
            f"impl From<bridging::{mirror}> for Option<{rust_type}> {{",
            f"    fn from(value: bridging::{mirror}) -> Self {{",
            "        if value.null {",
            "            None",
            "        } else {",
            "            Some(value.val)",
            "        }",
            "    }",
            "}",
            "",
            f"impl From<Option<{rust_type}>> for bridging::{mirror} {{",
            f"    fn from(value: Option<{rust_type}>) -> Self {{",
            "        match value {",
            f"            Some(val) => bridging::{mirror} {{ null: false, val }},",
            f"            None => bridging::{mirror} {{ null: true, val: {default} }},",
            "        }",
            "    }",
            "}",
        ]

    # C++ side

    def generate_module_header(self, ctx: CodegenContext, schema: Schema) -> str:
        namespace = cxx_namespace(ctx.project_name)
        cls = cxx_module_name(schema.module_name)
        struct = impl_struct_name(schema.module_name)
        lines = [
            "#pragma once",
            "",
            '#include "CrabyUtils.hpp"',
            '#include "ffi.rs.h"',
        ]
        if schema.signals:
            lines.append('#include "CrabySignals.h"')
        lines.extend([
            "",
            "#include <ReactCommon/TurboModule.h>",
            "#include <jsi/jsi.h>",
            "",
            "#include <atomic>",
            "#include <memory>",
            "#include <string>",
            "",
            *namespace_open(namespace),
            "namespace modules {",
            "",
            f"class JSI_EXPORT {cls} : public facebook::react::TurboModule {{",
            "public:",
            f'  static constexpr const char *kModuleName = "{schema.module_name}";',
            "  static std::string dataPath;",
            "",
            f"  {cls}(std::shared_ptr<facebook::react::CallInvoker> jsInvoker);",
            f"  ~{cls}();",
            "",
            "  void invalidate();",
        ])
        if schema.signals:
            lines.append("  void emit(const std::string &name);")
        lines.append("")
        for name in [m.name for m in schema.methods] + [s.name for s in schema.signals]:
            lines.extend([
                f"  static facebook::jsi::Value {name}(facebook::jsi::Runtime &rt,",
                "                                    facebook::react::TurboModule &turboModule,",
                "                                    const facebook::jsi::Value args[],",
                "                                    size_t count);",
            ])
        lines.extend([
            "",
            "protected:",
            "  std::shared_ptr<facebook::react::CallInvoker> callInvoker_;",
            f"  std::shared_ptr<{namespace}::bridging::{struct}> module_;",
            f"  std::shared_ptr<{namespace}::utils::ListenerRegistry> listeners_;",
            f"  std::shared_ptr<{namespace}::utils::ThreadPool> threadPool_;",
            "  std::atomic<bool> invalidated_{false};",
            "};",
            "",
            "} // namespace modules",
            *namespace_close(namespace),
        ])
        return "\n".join(lines)

    def generate_module_impl(self, ctx: CodegenContext, schema: Schema) -> str:
        namespace = cxx_namespace(ctx.project_name)
        cls = cxx_module_name(schema.module_name)
        struct = impl_struct_name(schema.module_name)
        lines = [
            f'#include "{cls}.hpp"',
            '#include "bridging-generated.hpp"',
            "",
            "#include <react/bridging/Bridging.h>",
            "",
            "using namespace facebook;",
            "",
            *namespace_open(namespace),
            "namespace modules {",
            "",
            f"std::string {cls}::dataPath;",
            "",
            f"{cls}::{cls}(std::shared_ptr<react::CallInvoker> jsInvoker)",
            f"    : TurboModule({cls}::kModuleName, jsInvoker),",
            "      callInvoker_(jsInvoker),",
            "      listeners_(std::make_shared<utils::ListenerRegistry>()),",
            f"      threadPool_(std::make_shared<utils::ThreadPool>({THREAD_POOL_SIZE})) {{",
            "  auto id = reinterpret_cast<uintptr_t>(this);",
            f"  module_ = std::shared_ptr<bridging::{struct}>(",
            f"      bridging::{create_fn_name(schema.module_name)}(id).into_raw(),",
            f"      [](bridging::{struct} *ptr) {{ rust::Box<bridging::{struct}>::from_raw(ptr); }});",
        ]
        if schema.signals:
            lines.extend([
                "  signals::getSignalManager().registerDelegate(",
                "      id, [this](const std::string &name) { this->emit(name); });",
            ])
        for method in schema.methods:
            lines.append(
                f'  methodMap_["{method.name}"] = MethodMetadata{{{len(method.params)}, &{cls}::{method.name}}};'
            )
        for signal in schema.signals:
            lines.append(f'  methodMap_["{signal.name}"] = MethodMetadata{{1, &{cls}::{signal.name}}};')
        lines.extend([
            "}",
            "",
            f"{cls}::~{cls}() {{",
            "  invalidate();",
            "}",
            "",
            f"void {cls}::invalidate() {{",
            "  if (invalidated_.exchange(true)) {",
            "    return;",
            "  }",
            "  listeners_->clear();",
        ])
        if schema.signals:
            lines.append("  signals::getSignalManager().unregisterDelegate(reinterpret_cast<uintptr_t>(this));")
        lines.extend([
            "  threadPool_->shutdown();",
            "}",
        ])

        if schema.signals:
            lines.extend([
                "",
                f"void {cls}::emit(const std::string &name) {{",
                "  if (invalidated_.load()) {",
                "    return;",
                "  }",
                "  for (auto &listener : listeners_->snapshot(name)) {",
                "    callInvoker_->invokeAsync([listener](jsi::Runtime &rt) {",
                "      try {",
                "        listener->call(rt);",
                "      } catch (...) {",
                "        // Listener failures stay with the listener",
                "      }",
                "    });",
                "  }",
                "}",
            ])

        for method in schema.methods:
            with type_context(module=schema.module_name, method=method.name):
                lines.extend(["", *self._method_impl(cls, schema, method)])
        for signal in schema.signals:
            lines.extend(["", *self._subscribe_impl(cls, signal.name)])

        lines.extend([
            "",
            "} // namespace modules",
            *namespace_close(namespace),
        ])
        return "\n".join(lines)

    def _dispatch_head(self, cls: str, name: str) -> list[str]:
        return [
            f"jsi::Value {cls}::{name}(jsi::Runtime &rt,",
            "                          react::TurboModule &turboModule,",
            "                          const jsi::Value args[],",
            "                          size_t count) {",
            f"  auto &thisModule = static_cast<{cls} &>(turboModule);",
        ]

    def _method_impl(self, cls: str, schema: Schema, method: FunctionSpec) -> list[str]:
        total = len(method.params)
        required = method.required_arity
        if required == total:
            check = f"count != {total}"
            message = f"Expected {total} argument{'s' if total != 1 else ''}"
        else:
            check = f"count < {required} || count > {total}"
            message = f"Expected {required} to {total} arguments"

        lines = self._dispatch_head(cls, method.name)
        lines.extend([
            "  auto callInvoker = thisModule.callInvoker_;",
            "  auto it_ = thisModule.module_;",
            "",
            "  try {",
            "    if (thisModule.invalidated_.load()) {",
            f'      throw jsi::JSError(rt, "{schema.module_name} has been invalidated");',
            "    }",
            f"    if ({check}) {{",
            f'      throw jsi::JSError(rt, "{message}");',
            "    }",
            "",
        ])
        args = []
        for index, param in enumerate(method.params):
            with type_context(param=param.name):
                cxx_type = TypeMapper.param_to_cxx(param)
            value = f"args[{index}]" if index < required else f"utils::argAt(rt, args, count, {index})"
            lines.append(f"    auto arg{index} = react::bridging::fromJs<{cxx_type}>(rt, {value}, callInvoker);")
            args.append(f"arg{index}")

        call = f"bridging::{bridge_fn_name(schema.module_name, method.name)}({', '.join(['*it_'] + args)})"
        if isinstance(method.return_type, VoidType):
            lines.extend([
                f"    {call};",
                "",
                "    return jsi::Value::undefined();",
            ])
        else:
            lines.extend([
                f"    auto ret = {call};",
                "",
                "    return react::bridging::toJs(rt, ret);",
            ])
        lines.extend([
            "  } catch (const jsi::JSError &err) {",
            "    throw;",
            "  } catch (const std::exception &err) {",
            "    throw jsi::JSError(rt, utils::errorMessage(err));",
            "  }",
            "}",
        ])
        return lines

    def _subscribe_impl(self, cls: str, signal: str) -> list[str]:
        """Listener registration; returns an idempotent cleanup function"""
        lines = self._dispatch_head(cls, signal)
        lines.extend([
            "  if (count != 1 || !args[0].isObject() || !args[0].asObject(rt).isFunction(rt)) {",
            '    throw jsi::JSError(rt, "Expected a listener function");',
            "  }",
            "",
            "  auto listener = std::make_shared<jsi::Function>(args[0].asObject(rt).asFunction(rt));",
            f'  auto id = thisModule.listeners_->add("{signal}", listener);',
            "  std::weak_ptr<utils::ListenerRegistry> registry = thisModule.listeners_;",
            "",
            "  return jsi::Function::createFromHostFunction(",
            '      rt, jsi::PropNameID::forAscii(rt, "cleanup"), 0,',
            "      [registry, id](jsi::Runtime &rt, const jsi::Value &, const jsi::Value *, size_t) {",
            "        if (auto listeners = registry.lock()) {",
            f'          listeners->remove("{signal}", id);',
            "        }",
            "        return jsi::Value::undefined();",
            "      });",
            "}",
        ])
        return lines

    def generate_utils_header(self, ctx: CodegenContext) -> str:
        namespace = cxx_namespace(ctx.project_name)
        lines = [
            "#pragma once",
            "",
            '#include "rust/cxx.h"',
            "",
            "#include <jsi/jsi.h>",
            "",
            "#include <condition_variable>",
            "#include <functional>",
            "#include <map>",
            "#include <memory>",
            "#include <mutex>",
            "#include <queue>",
            "#include <string>",
            "#include <thread>",
            "#include <vector>",
            "",
            *namespace_open(namespace),
            "namespace utils {",
            "",
            "class ThreadPool {",
            "public:",
            "  explicit ThreadPool(size_t numThreads) {",
            "    for (size_t i = 0; i < numThreads; ++i) {",
            "      workers_.emplace_back([this] { work(); });",
            "    }",
            "  }",
            "",
            "  ~ThreadPool() { shutdown(); }",
            "",
            "  // Never blocks; work submitted after shutdown is dropped",
            "  void enqueue(std::function<void()> task) {",
            "    {",
            "      std::lock_guard<std::mutex> lock(mutex_);",
            "      if (stop_) {",
            "        return;",
            "      }",
            "      tasks_.emplace(std::move(task));",
            "    }",
            "    condition_.notify_one();",
            "  }",
            "",
            "  void shutdown() {",
            "    {",
            "      std::lock_guard<std::mutex> lock(mutex_);",
            "      if (stop_) {",
            "        return;",
            "      }",
            "      stop_ = true;",
            "      std::queue<std::function<void()>> pending;",
            "      std::swap(tasks_, pending);",
            "    }",
            "    condition_.notify_all();",
            "    for (auto &worker : workers_) {",
            "      if (!worker.joinable()) {",
            "        continue;",
            "      }",
            "      if (worker.get_id() == std::this_thread::get_id()) {",
            "        worker.detach();",
            "      } else {",
            "        worker.join();",
            "      }",
            "    }",
            "  }",
            "",
            "private:",
            "  void work() {",
            "    while (true) {",
            "      std::function<void()> task;",
            "      {",
            "        std::unique_lock<std::mutex> lock(mutex_);",
            "        condition_.wait(lock, [this] { return stop_ || !tasks_.empty(); });",
            "        if (stop_) {",
            "          return;",
            "        }",
            "        task = std::move(tasks_.front());",
            "        tasks_.pop();",
            "      }",
            "      try {",
            "        task();",
            "      } catch (...) {",
            "      }",
            "    }",
            "  }",
            "",
            "  std::vector<std::thread> workers_;",
            "  std::queue<std::function<void()>> tasks_;",
            "  std::mutex mutex_;",
            "  std::condition_variable condition_;",
            "  bool stop_ = false;",
            "};",
            "",
            "class ListenerRegistry {",
            "public:",
            "  using Listener = std::shared_ptr<facebook::jsi::Function>;",
            "",
            "  size_t add(const std::string &name, Listener listener) {",
            "    std::lock_guard<std::mutex> lock(mutex_);",
            "    auto id = nextId_++;",
            "    listeners_[name].emplace(id, std::move(listener));",
            "    return id;",
            "  }",
            "",
            "  void remove(const std::string &name, size_t id) {",
            "    std::lock_guard<std::mutex> lock(mutex_);",
            "    auto it = listeners_.find(name);",
            "    if (it != listeners_.end()) {",
            "      it->second.erase(id);",
            "    }",
            "  }",
            "",
            "  // Copy taken under the lock; callers invoke listeners without holding it",
            "  std::vector<Listener> snapshot(const std::string &name) {",
            "    std::lock_guard<std::mutex> lock(mutex_);",
            "    std::vector<Listener> result;",
            "    auto it = listeners_.find(name);",
            "    if (it != listeners_.end()) {",
            "      for (auto &entry : it->second) {",
            "        result.push_back(entry.second);",
            "      }",
            "    }",
            "    return result;",
            "  }",
            "",
            "  void clear() {",
            "    std::lock_guard<std::mutex> lock(mutex_);",
            "    listeners_.clear();",
            "  }",
            "",
            "private:",
            "  std::mutex mutex_;",
            "  size_t nextId_ = 0;",
            "  std::map<std::string, std::map<size_t, Listener>> listeners_;",
            "};",
            "",
            "inline facebook::jsi::Value argAt(facebook::jsi::Runtime &rt,",
            "                                  const facebook::jsi::Value args[],",
            "                                  size_t count,",
            "                                  size_t index) {",
            "  if (index < count) {",
            "    return facebook::jsi::Value(rt, args[index]);",
            "  }",
            "  return facebook::jsi::Value::undefined();",
            "}",
            "",
            "inline std::string errorMessage(const std::exception &err) {",
            "  if (auto rustError = dynamic_cast<const rust::Error *>(&err)) {",
            "    return std::string(rustError->what());",
            "  }",
            "  return std::string(err.what());",
            "}",
            "",
            "} // namespace utils",
            *namespace_close(namespace),
        ]
        return "\n".join(lines)

    def generate_signals_header(self, ctx: CodegenContext) -> str:
        namespace = cxx_namespace(ctx.project_name)
        lines = [
            "#pragma once",
            "",
            '#include "rust/cxx.h"',
            "",
            "#include <cstdint>",
            "#include <functional>",
            "#include <mutex>",
            "#include <string>",
            "#include <unordered_map>",
            "",
            *namespace_open(namespace),
            "namespace signals {",
            "",
            "using Delegate = std::function<void(const std::string &name)>;",
            "",
            "class SignalManager {",
            "public:",
            "  static SignalManager &getInstance() {",
            "    static SignalManager instance;",
            "    return instance;",
            "  }",
            "",
            "  void emit(size_t id, rust::Str name) const {",
            "    Delegate delegate;",
            "    {",
            "      std::lock_guard<std::mutex> lock(mutex_);",
            "      auto it = delegates_.find(id);",
            "      if (it == delegates_.end()) {",
            "        return;",
            "      }",
            "      delegate = it->second;",
            "    }",
            "    delegate(std::string(name));",
            "  }",
            "",
            "  void registerDelegate(size_t id, Delegate delegate) const {",
            "    std::lock_guard<std::mutex> lock(mutex_);",
            "    delegates_.insert_or_assign(id, std::move(delegate));",
            "  }",
            "",
            "  void unregisterDelegate(size_t id) const {",
            "    std::lock_guard<std::mutex> lock(mutex_);",
            "    delegates_.erase(id);",
            "  }",
            "",
            "private:",
            "  SignalManager() = default;",
            "",
            "  mutable std::mutex mutex_;",
            "  mutable std::unordered_map<size_t, Delegate> delegates_;",
            "};",
            "",
            "inline const SignalManager &getSignalManager() {",
            "  return SignalManager::getInstance();",
            "}",
            "",
            "} // namespace signals",
            *namespace_close(namespace),
        ]
        return "\n".join(lines)

    def generate_bridging_header(self, ctx: CodegenContext) -> str:
        namespace = cxx_namespace(ctx.project_name)
        lines = [
            "#pragma once",
            "",
            '#include "ffi.rs.h"',
            '#include "rust/cxx.h"',
            "",
            "#include <react/bridging/Bridging.h>",
            "",
            "namespace facebook {",
            "namespace react {",
            "",
            "template <>",
            "struct Bridging<rust::Str> {",
            "  static jsi::String toJs(jsi::Runtime &rt, const rust::Str &value) {",
            "    return jsi::String::createFromUtf8(rt, std::string(value));",
            "  }",
            "};",
            "",
            "template <>",
            "struct Bridging<rust::String> {",
            "  static rust::String fromJs(jsi::Runtime &rt,",
            "                             const jsi::Value &value,",
            "                             std::shared_ptr<CallInvoker> callInvoker) {",
            "    return rust::String(value.asString(rt).utf8(rt));",
            "  }",
            "",
            "  static jsi::String toJs(jsi::Runtime &rt, const rust::String &value) {",
            "    return jsi::String::createFromUtf8(rt, std::string(value));",
            "  }",
            "};",
            "",
            "template <typename T>",
            "struct Bridging<rust::Vec<T>> {",
            "  static rust::Vec<T> fromJs(jsi::Runtime &rt,",
            "                             const jsi::Value &value,",
            "                             std::shared_ptr<CallInvoker> callInvoker) {",
            "    auto arr = value.asObject(rt).asArray(rt);",
            "    size_t len = arr.length(rt);",
            "    rust::Vec<T> vec;",
            "    vec.reserve(len);",
            "    for (size_t i = 0; i < len; i++) {",
            "      vec.push_back(bridging::fromJs<T>(rt, arr.getValueAtIndex(rt, i), callInvoker));",
            "    }",
            "    return vec;",
            "  }",
            "",
            "  static jsi::Array toJs(jsi::Runtime &rt, const rust::Vec<T> &vec) {",
            "    auto arr = jsi::Array(rt, vec.size());",
            "    for (size_t i = 0; i < vec.size(); i++) {",
            "      arr.setValueAtIndex(rt, i, bridging::toJs(rt, vec[i]));",
            "    }",
            "    return arr;",
            "  }",
            "};",
        ]
        for kind in TypeMapper.nullable_mirrors(ctx.schemas):
            lines.extend(["", *self._nullable_bridging(namespace, kind)])
        lines.extend([
            "",
            "} // namespace react",
            "} // namespace facebook",
        ])
        return "\n".join(lines)

    def _nullable_bridging(self, namespace: str, kind: str) -> list[str]:
        mirror = f"{namespace}::bridging::{TypeMapper.NULLABLE_MIRRORS[kind]}"
        _, cxx_type, default = NULLABLE_DEFAULTS[kind]
        if kind == "string":
            to_js = "jsi::Value(rt, jsi::String::createFromUtf8(rt, std::string(value.val)))"
        else:
            to_js = "jsi::Value(value.val)"
        return [
            "template <>",
            f"struct Bridging<{mirror}> {{",
            f"  static {mirror} fromJs(jsi::Runtime &rt,",
            "                         const jsi::Value &value,",
            "                         std::shared_ptr<CallInvoker> callInvoker) {",
            "    if (value.isNull() || value.isUndefined()) {",
            f"      return {mirror}{{true, {default}}};",
            "    }",
            f"    return {mirror}{{false, bridging::fromJs<{cxx_type}>(rt, value, callInvoker)}};",
            "  }",
            "",
            f"  static jsi::Value toJs(jsi::Runtime &rt, const {mirror} &value) {{",
            "    if (value.null) {",
            "      return jsi::Value::null();",
            "    }",
            f"    return {to_js};",
            "  }",
            "};",
        ]
