from __future__ import annotations

import pytest

from crabgen import naming


@pytest.mark.parametrize(
    "value, pascal, camel, snake, kebab, flat",
    [
        ("MyTestModule", "MyTestModule", "myTestModule", "my_test_module", "my-test-module", "mytestmodule"),
        ("my-app", "MyApp", "myApp", "my_app", "my-app", "myapp"),
        ("HTTPServer", "HttpServer", "httpServer", "http_server", "http-server", "httpserver"),
        ("getURL", "GetUrl", "getUrl", "get_url", "get-url", "geturl"),
        ("module2Api", "Module2Api", "module2Api", "module_2_api", "module-2-api", "module2api"),
    ],
)
def test_case_conversions(value, pascal, camel, snake, kebab, flat):
    assert naming.pascal_case(value) == pascal
    assert naming.camel_case(value) == camel
    assert naming.snake_case(value) == snake
    assert naming.kebab_case(value) == kebab
    assert naming.flat_case(value) == flat


def test_sanitize_str_drops_non_letters():
    assert naming.sanitize_str("MyModule") == "my_module"
    assert naming.sanitize_str("my-module2") == "my_module"
    assert naming.sanitize_str("getValue") == "get_value"


def test_sanitized_name_keeps_digits():
    assert naming.sanitized_name("My-App 2") == "my_app_2"


def test_synthesized_names():
    assert naming.cxx_namespace("my-app") == "craby::myapp"
    assert naming.cxx_module_name("MyTestModule") == "CxxMyTestModuleModule"
    assert naming.objc_provider_name("my-app") == "MyAppModuleProvider"
    assert naming.impl_mod_name("MyTestModule") == "my_test_module_impl"
    assert naming.spec_trait_name("MyTestModule") == "MyTestModuleSpec"
    assert naming.signal_enum_name("MyTestModule") == "MyTestModuleSignal"
    assert naming.dest_lib_name("my-app") == "libmyapp-prebuilt.a"
    assert naming.cxx_lib_name("my-app") == "cxx-my-app"
    assert naming.bridge_fn_name("MyTestModule", "numericMethod") == "my_test_module_numeric_method"
    assert naming.rn_package_name("my-app") == "MyAppPackage"
    assert naming.jni_prepare_module_name("MyTestModule") == "__crabyMyTestModule_JNI_prepare__"


def test_jni_fn_name():
    name = naming.jni_fn_name("com.example", "MyModuleModule", "nativeMultiply")
    assert name == "Java_com_example_MyModuleModule_nativeMultiply"


def test_jni_fn_name_escapes_underscores():
    name = naming.jni_fn_name("com.my_company", "Some_Module", "nativeRun")
    assert name == "Java_com_my_1company_Some_1Module_nativeRun"


def test_jni_escape_non_ascii():
    assert naming.jni_escape("é") == "_000e9"


def test_rs_ident_avoids_keywords_and_shim_names():
    assert naming.rs_ident("type") == "type_"
    assert naming.rs_ident("env") == "env_"
    assert naming.rs_ident("userName") == "user_name"


def test_c_ident_avoids_c_and_cpp_keywords():
    assert naming.c_ident("int") == "int_"
    assert naming.c_ident("default") == "default_"
    assert naming.c_ident("new") == "new_"
    assert naming.c_ident("userName") == "user_name"


def test_kotlin_ident_escapes_hard_keywords():
    assert naming.kotlin_ident("fun") == "`fun`"
    assert naming.kotlin_ident("object") == "`object`"
    assert naming.kotlin_ident("default") == "default"
    assert naming.kotlin_ident("userName") == "userName"
