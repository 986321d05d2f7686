"""Android Generator - JNI exports, JVM declarations and the native build glue"""

from pathlib import Path

from .ffi_generator import FFIGenerator
from .naming import (
    cxx_lib_name, cxx_module_name, cxx_namespace, dest_lib_name, jni_class_name,
    jni_fn_name, jni_native_method_name, jni_prepare_module_name, kotlin_ident,
    pascal_case, rn_package_name,
)
from .paths import android_crate_dir, android_path, android_src_main_path, java_base_path, jni_base_path
from .type_mapper import TypeMapper, type_context
from .types import CodegenContext, FunctionSpec, GenerateResult, Platform, Schema, VoidType


class AndroidGenerator(FFIGenerator):
    """Generates the JNI layer"""

    name = "android"
    platform = Platform.ANDROID

    def crate_dir(self, ctx: CodegenContext) -> Path:
        return android_crate_dir(ctx.root)

    def generate(self, ctx: CodegenContext) -> list[GenerateResult]:
        results = self.generate_crate_files(ctx)
        java_dir = java_base_path(ctx.root, ctx.android_package_name)
        for schema in ctx.schemas:
            with type_context(module=schema.module_name):
                content = self.generate_kotlin_module(ctx, schema)
            results.append(GenerateResult(java_dir / f"{jni_class_name(schema.module_name)}.kt", content))
        results.append(GenerateResult(java_dir / f"{rn_package_name(ctx.project_name)}.kt", self.generate_rn_package(ctx)))
        results.append(GenerateResult(jni_base_path(ctx.root) / "OnLoad.cpp", self.generate_on_load(ctx)))
        android_dir = android_path(ctx.root)
        results.append(GenerateResult(android_dir / "CMakeLists.txt", self.generate_cmake(ctx)))
        results.append(GenerateResult(android_dir / "build.gradle", self.generate_build_gradle(ctx)))
        results.append(GenerateResult(android_dir / "gradle.properties", self.generate_gradle_properties(ctx)))
        results.append(GenerateResult(
            android_src_main_path(ctx.root) / "AndroidManifest.xml", self.generate_manifest(ctx)
        ))
        self.logger.debug("Generated %d android files", len(results))
        return results

    def stale_files(self, ctx: CodegenContext):
        java_dir = java_base_path(ctx.root, ctx.android_package_name)
        return super().stale_files(ctx) + self._glob(java_dir, "*Module.kt")

    # Rust shims

    def base_imports(self, schema: Schema) -> list[str]:
        lines = [
            "use craby_core::jni::sys::*;",
            "use craby_core::jni::{objects::JObject, JNIEnv};",
        ]
        if any(TypeMapper.needs_interop(method, self.platform) for method in schema.methods):
            lines.append("use crate::throw_interop_error;")
        return lines

    def symbol_name(self, ctx: CodegenContext, schema: Schema, method: FunctionSpec) -> str:
        return jni_fn_name(
            ctx.android_package_name,
            jni_class_name(schema.module_name),
            jni_native_method_name(method.name),
        )

    def leading_params(self, needs_interop: bool) -> list[str]:
        env = "mut env: JNIEnv" if needs_interop else "_env: JNIEnv"
        return [env, "_class: JObject"]

    def from_call(self, fn: str, value: str) -> str:
        return f"{fn}({value}, &mut env)"

    def to_call(self, value: str, fn: str) -> str:
        return f"{value}.{fn}(&mut env)"

    def failure(self, what: str, failure_value: str) -> list[str]:
        return [
            f'throw_interop_error(&mut env, "{what}", err);',
            failure_value,
        ]

    def generate_lib_rs(self, ctx: CodegenContext) -> str:
        lines = [
            "use craby_core::jni::JNIEnv;",
            "",
            *self.ffi_mod_decls(ctx),
            "",
            "/// Raise a `RuntimeException` in the calling JVM thread",
            "pub(crate) fn throw_interop_error<E: std::fmt::Debug>(env: &mut JNIEnv, what: &str, err: E) {",
            '    let message = format!("Invalid {}: {:?}", what, err);',
            '    if env.throw_new("java/lang/RuntimeException", message).is_err() {',
            '        panic!("Failed to throw a Java exception for {}", what);',
            "    }",
            "}",
        ]
        return "\n".join(lines)

    # JVM side

    def generate_kotlin_module(self, ctx: CodegenContext, schema: Schema) -> str:
        lines = [
            f"package {ctx.android_package_name}",
            "",
            f"object {jni_class_name(schema.module_name)} {{",
            "  init {",
            f'    System.loadLibrary("{cxx_lib_name(ctx.project_name)}")',
            "  }",
        ]
        for method in schema.methods:
            with type_context(method=method.name):
                lines.extend(["", "  @JvmStatic", f"  {self._kotlin_signature(method)}"])
        lines.append("}")
        return "\n".join(lines)

    def _kotlin_signature(self, method: FunctionSpec) -> str:
        params = []
        for param in method.params:
            kotlin_type = TypeMapper.to_kotlin(param.type_annotation, param.optional)
            params.append(f"{kotlin_ident(param.name)}: {kotlin_type}")
        signature = f"external fun {jni_native_method_name(method.name)}({', '.join(params)})"
        if not isinstance(method.return_type, VoidType):
            signature += f": {TypeMapper.to_kotlin(method.return_type)}"
        return signature

    # Native build glue

    def generate_on_load(self, ctx: CodegenContext) -> str:
        namespace = cxx_namespace(ctx.project_name)
        set_data_path = jni_fn_name(ctx.android_package_name, rn_package_name(ctx.project_name), "nativeSetDataPath")
        lines = []
        for schema in ctx.schemas:
            lines.append(f'#include "{cxx_module_name(schema.module_name)}.hpp"')
        lines.extend([
            "",
            "#include <ReactCommon/CxxTurboModuleUtils.h>",
            "#include <jni.h>",
            "",
            "#include <memory>",
            "#include <string>",
            "",
            "extern \"C\" JNIEXPORT jint JNI_OnLoad(JavaVM *vm, void *reserved) {",
        ])
        for schema in ctx.schemas:
            cls = f"{namespace}::modules::{cxx_module_name(schema.module_name)}"
            lines.extend([
                "  facebook::react::registerCxxModuleToGlobalModuleMap(",
                f"      std::string({cls}::kModuleName),",
                "      [](std::shared_ptr<facebook::react::CallInvoker> jsInvoker) {",
                f"        return std::make_shared<{cls}>(jsInvoker);",
                "      });",
            ])
        lines.extend([
            "  return JNI_VERSION_1_6;",
            "}",
            "",
            "extern \"C\" JNIEXPORT void JNICALL",
            f"{set_data_path}(JNIEnv *env, jobject thiz, jstring jDataPath) {{",
            "  const char *chars = env->GetStringUTFChars(jDataPath, nullptr);",
            "  std::string dataPath(chars);",
            "  env->ReleaseStringUTFChars(jDataPath, chars);",
        ])
        for schema in ctx.schemas:
            lines.append(f"  {namespace}::modules::{cxx_module_name(schema.module_name)}::dataPath = dataPath;")
        lines.append("}")
        return "\n".join(lines)

    def generate_cmake(self, ctx: CodegenContext) -> str:
        lib = cxx_lib_name(ctx.project_name)
        lines = [
            "cmake_minimum_required(VERSION 3.13)",
            f"project({lib})",
            "",
            "set(CMAKE_CXX_STANDARD 20)",
            "set(CMAKE_CXX_STANDARD_REQUIRED ON)",
            "",
            "find_package(ReactAndroid REQUIRED CONFIG)",
            "find_package(fbjni REQUIRED CONFIG)",
            "",
            "add_library(craby-prebuilt STATIC IMPORTED)",
            "set_target_properties(craby-prebuilt PROPERTIES",
            f"  IMPORTED_LOCATION ${{CMAKE_SOURCE_DIR}}/src/main/libs/${{ANDROID_ABI}}/{dest_lib_name(ctx.project_name)}",
            ")",
            "",
            f"add_library({lib} SHARED",
            "  src/main/jni/OnLoad.cpp",
            "  src/main/jni/src/ffi.rs.cc",
        ]
        for schema in ctx.schemas:
            lines.append(f"  ../cpp/{cxx_module_name(schema.module_name)}.cpp")
        lines.extend([
            ")",
            "",
            f"target_include_directories({lib} PRIVATE",
            "  src/main/jni/include",
            "  src/main/jni/src",
            "  ../cpp",
            "  ../crates/lib/include",
            ")",
            "",
            f"target_link_libraries({lib}",
            "  craby-prebuilt",
            "  fbjni::fbjni",
            "  ReactAndroid::jsi",
            "  ReactAndroid::reactnative",
            ")",
        ])
        return "\n".join(lines)

    def generate_build_gradle(self, ctx: CodegenContext) -> str:
        pascal = pascal_case(ctx.project_name)
        package = ctx.android_package_name
        lines = [
            "def reactNativeArchitectures() {",
            '  def value = rootProject.getProperties().get("reactNativeArchitectures")',
            '  return value ? value.split(",") : ["armeabi-v7a", "x86", "x86_64", "arm64-v8a"]',
            "}",
            "",
            "buildscript {",
            "  ext.getExtOrDefault = {name ->",
            f"    return rootProject.ext.has(name) ? rootProject.ext.get(name) : project.properties['{pascal}_' + name]",
            "  }",
            "",
            "  repositories {",
            "    google()",
            "    mavenCentral()",
            "  }",
            "",
            "  dependencies {",
            '    classpath "com.android.tools.build:gradle:8.7.2"',
            "    // noinspection DifferentKotlinGradleVersion",
            "    classpath \"org.jetbrains.kotlin:kotlin-gradle-plugin:${getExtOrDefault('kotlinVersion')}\"",
            "  }",
            "}",
            "",
            'apply plugin: "com.android.library"',
            'apply plugin: "kotlin-android"',
            'apply plugin: "com.facebook.react"',
            "",
            "def getExtOrIntegerDefault(name) {",
            f'  return rootProject.ext.has(name) ? rootProject.ext.get(name) : (project.properties["{pascal}_" + name]).toInteger()',
            "}",
            "",
            "android {",
            f'  namespace "{package}"',
            "",
            '  compileSdkVersion getExtOrIntegerDefault("compileSdkVersion")',
            "",
            "  defaultConfig {",
            '    minSdkVersion getExtOrIntegerDefault("minSdkVersion")',
            '    targetSdkVersion getExtOrIntegerDefault("targetSdkVersion")',
            "",
            "    externalNativeBuild {",
            "      cmake {",
            f'        targets "{cxx_lib_name(ctx.project_name)}"',
            '        cppFlags "-frtti -fexceptions -Wall -Wextra -fstack-protector-all"',
            '        arguments "-DANDROID_STL=c++_shared", "-DANDROID_SUPPORT_FLEXIBLE_PAGE_SIZES=ON"',
            "        abiFilters (*reactNativeArchitectures())",
            "        buildTypes {",
            "          debug {",
            '            cppFlags "-O1 -g"',
            "          }",
            "          release {",
            '            cppFlags "-O2"',
            "          }",
            "        }",
            "      }",
            "    }",
            "  }",
            "",
            "  externalNativeBuild {",
            "    cmake {",
            '      path "CMakeLists.txt"',
            "    }",
            "  }",
            "",
            "  buildFeatures {",
            "    buildConfig true",
            "    prefab true",
            "  }",
            "",
            "  buildTypes {",
            "    debug {",
            "      jniDebuggable true",
            "    }",
            "    release {",
            "      minifyEnabled false",
            "      externalNativeBuild {",
            "        cmake {",
            '          arguments "-DCMAKE_BUILD_TYPE=Release"',
            "        }",
            "      }",
            "    }",
            "  }",
            "",
            "  lintOptions {",
            '    disable "GradleCompatible"',
            "  }",
            "",
            "  compileOptions {",
            "    sourceCompatibility JavaVersion.VERSION_1_8",
            "    targetCompatibility JavaVersion.VERSION_1_8",
            "  }",
            "}",
            "",
            "repositories {",
            "  mavenCentral()",
            "  google()",
            "}",
            "",
            'def kotlin_version = getExtOrDefault("kotlinVersion")',
            "",
            "dependencies {",
            '  implementation "com.facebook.react:react-android"',
            '  implementation "com.facebook.react:hermes-engine"',
            '  implementation "org.jetbrains.kotlin:kotlin-stdlib:$kotlin_version"',
            "}",
            "",
            "react {",
            '  jsRootDir = file("../src/")',
            f'  libraryName = "{pascal}_stub"',
            f'  codegenJavaPackageName = "{package}"',
            "}",
        ]
        return "\n".join(lines)

    def generate_gradle_properties(self, ctx: CodegenContext) -> str:
        pascal = pascal_case(ctx.project_name)
        versions = [
            ("kotlinVersion", "2.0.21"),
            ("minSdkVersion", "24"),
            ("targetSdkVersion", "34"),
            ("compileSdkVersion", "35"),
            ("ndkVersion", "27.1.12297006"),
        ]
        return "\n".join(f"{pascal}_{key}={value}" for key, value in versions)

    def generate_manifest(self, ctx: CodegenContext) -> str:
        lines = [
            '<manifest xmlns:android="http://schemas.android.com/apk/res/android"',
            f'  package="{ctx.android_package_name}">',
            "</manifest>",
        ]
        return "\n".join(lines)

    def generate_rn_package(self, ctx: CodegenContext) -> str:
        """React package that loads the native library and answers for every module.

        Asking for a module's prepare name sets the data path through JNI
        before the TurboModule itself is created on the native side.
        """
        package_class = rn_package_name(ctx.project_name)
        prepare_names = ",\n".join(
            f'      "{jni_prepare_module_name(schema.module_name)}"' for schema in ctx.schemas
        )
        lines = [
            f"package {ctx.android_package_name}",
            "",
            "import com.facebook.react.BaseReactPackage",
            "import com.facebook.react.bridge.NativeModule",
            "import com.facebook.react.bridge.ReactApplicationContext",
            "import com.facebook.react.bridge.ReactContextBaseJavaModule",
            "import com.facebook.react.module.model.ReactModuleInfo",
            "import com.facebook.react.module.model.ReactModuleInfoProvider",
            "import com.facebook.react.turbomodule.core.interfaces.TurboModule",
            "import com.facebook.soloader.SoLoader",
            "import javax.annotation.Nonnull",
            "",
            f"class {package_class} : BaseReactPackage() {{",
            "  companion object {",
            "    val JNI_PREPARE_MODULE_NAME = setOf(",
            prepare_names,
            "    )",
            "  }",
            "",
            "  init {",
            f'    SoLoader.loadLibrary("{cxx_lib_name(ctx.project_name)}")',
            "  }",
            "",
            "  override fun getModule(name: String, reactContext: ReactApplicationContext): NativeModule? {",
            "    if (name in JNI_PREPARE_MODULE_NAME) {",
            "      nativeSetDataPath(reactContext.filesDir.absolutePath)",
            f"      return {package_class}.TurboModulePlaceholder(reactContext, name)",
            "    }",
            "    return null",
            "  }",
            "",
            "  override fun getReactModuleInfoProvider(): ReactModuleInfoProvider {",
            "    return ReactModuleInfoProvider {",
            "      val moduleInfos: MutableMap<String, ReactModuleInfo> = HashMap()",
            "      JNI_PREPARE_MODULE_NAME.forEach { name ->",
            "        moduleInfos[name] = ReactModuleInfo(",
            "          name,",
            "          name,",
            "          false,  // canOverrideExistingModule",
            "          false,  // needsEagerInit",
            "          false,  // isCxxModule",
            "          true,  // isTurboModule",
            "        )",
            "      }",
            "      moduleInfos",
            "    }",
            "  }",
            "",
            "  private external fun nativeSetDataPath(dataPath: String)",
            "",
            "  class TurboModulePlaceholder(reactContext: ReactApplicationContext?, private val name: String) :",
            "    ReactContextBaseJavaModule(reactContext),",
            "    TurboModule {",
            "    @Nonnull",
            "    override fun getName(): String {",
            "      return name",
            "    }",
            "  }",
            "}",
        ]
        return "\n".join(lines)
