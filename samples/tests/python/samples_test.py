#!/usr/bin/env python3
"""
Sample application that generates bindings for the sample project and
drives a Python host implementation through the in-process bridge.

Run:
    python samples/tests/python/samples_test.py
"""

import shutil
import sys
import tempfile
import threading
from pathlib import Path

# Add repository root to path so the crabgen package can be found
sys.path.insert(0, str(Path(__file__).resolve().parents[3]))

from crabgen.cli import main as crabgen_main
from crabgen.errors import BridgeError
from crabgen.parser import SchemaParser
from crabgen.runtime import HostModule, NativeModule

SAMPLES_DIR = Path(__file__).resolve().parents[2]

OVERFLOW_LIMIT = 1e12


class NativeCalculator(HostModule):
    """Host implementation of the NativeCalculator schema"""

    def add(self, a, b):
        return self._checked(a + b)

    def multiply(self, a, b):
        return self._checked(a * b)

    def format(self, value, unit):
        return f"{value:g}{unit or ''}"

    def parse(self, text):
        try:
            return float(text)
        except ValueError:
            return None

    def is_positive(self, value):
        return value > 0

    def _checked(self, value):
        if abs(value) > OVERFLOW_LIMIT:
            self.emit("onOverflow")
        return value


def test_generation():
    """Generate the sample project and check the main artifacts"""
    print("Testing generation...")
    passed = True

    with tempfile.TemporaryDirectory() as tmp:
        project = Path(tmp)
        shutil.copy(SAMPLES_DIR / "craby.toml", project / "craby.toml")
        shutil.copytree(SAMPLES_DIR / "schemas", project / "schemas")

        code = crabgen_main([str(project)])
        if code != 0:
            print(f"  FAIL: crabgen exited with {code}")
            return False
        print("  PASS: crabgen exited with 0")

        expected = [
            "crates/lib/src/generated.rs",
            "crates/lib/src/ffi.rs",
            "crates/lib/src/native_calculator_impl.rs",
            "cpp/CxxNativeCalculatorModule.cpp",
            "crates/android/src/ffi/native_calculator.rs",
            "android/src/main/java/com/example/calculator/NativeCalculatorModule.kt",
            "android/src/main/java/com/example/calculator/CalculatorPackage.kt",
            "android/build.gradle",
            "android/src/main/AndroidManifest.xml",
            "crates/ios/src/ffi/native_calculator.rs",
            "ios/include/calculator.h",
        ]
        for rel in expected:
            if not (project / rel).exists():
                print(f"  FAIL: missing {rel}")
                passed = False
            else:
                print(f"  PASS: {rel}")

        header = (project / "ios" / "include" / "calculator.h").read_text(encoding="utf-8")
        if "char* format(double value, const char* unit);" not in header:
            print("  FAIL: C header does not declare format()")
            passed = False
        else:
            print("  PASS: C header declares format()")

    return passed


def test_bridge():
    """Call the host implementation through the in-process bridge"""
    print("\nTesting bridge...")
    passed = True

    (schema,) = SchemaParser.parse_file(SAMPLES_DIR / "schemas" / "NativeCalculator.json")
    module = NativeModule(schema, NativeCalculator, num_threads=2)

    try:
        result = module.call("add", 2, 3)
        if result != 5:
            print(f"  FAIL: add(2, 3) = {result}, expected 5")
            passed = False
        else:
            print(f"  PASS: add(2, 3) = {result}")

        result = module.call("format", 2.5)
        if result != "2.5":
            print(f"  FAIL: format(2.5) = {result!r}, expected '2.5'")
            passed = False
        else:
            print(f"  PASS: format(2.5) = {result!r}")

        result = module.call("format", 2.5, "kg")
        if result != "2.5kg":
            print(f"  FAIL: format(2.5, 'kg') = {result!r}, expected '2.5kg'")
            passed = False
        else:
            print(f"  PASS: format(2.5, 'kg') = {result!r}")

        result = module.call("parse", "abc")
        if result is not None:
            print(f"  FAIL: parse('abc') = {result}, expected None")
            passed = False
        else:
            print("  PASS: parse('abc') = None")

        try:
            module.call("multiply", 1)
            print("  FAIL: multiply(1) should raise")
            passed = False
        except BridgeError as e:
            print(f"  PASS: multiply(1) raised: {e}")

        overflows = []
        cleanup = module.add_listener("onOverflow", lambda: overflows.append(1))
        module.call("multiply", 1e7, 1e7)
        cleanup()
        module.call("multiply", 1e7, 1e7)
        if len(overflows) != 1:
            print(f"  FAIL: onOverflow fired {len(overflows)} times, expected 1")
            passed = False
        else:
            print("  PASS: onOverflow delivered once")

        done = threading.Event()
        outcome = []

        def on_result(result, error):
            outcome.append((result, error))
            done.set()

        module.call_async("isPositive", -1, callback=on_result)
        if not done.wait(timeout=5) or outcome[0] != (False, None):
            print(f"  FAIL: isPositive(-1) async = {outcome}")
            passed = False
        else:
            print("  PASS: isPositive(-1) async = False")
    finally:
        module.invalidate()

    return passed


def main():
    print("=== crabgen Samples Test ===\n")

    all_passed = True

    all_passed &= test_generation()
    all_passed &= test_bridge()

    print("\n=== Summary ===")
    if all_passed:
        print("All tests PASSED!")
        return 0
    else:
        print("Some tests FAILED!")
        return 1


if __name__ == "__main__":
    sys.exit(main())
