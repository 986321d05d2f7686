from __future__ import annotations

from crabgen.types import GenerateResult
from crabgen.writer import write_results


def test_writes_new_files_and_parents(tmp_path):
    target = tmp_path / "crates" / "lib" / "src" / "lib.rs"

    report = write_results(tmp_path, [GenerateResult(target, "mod ffi;\n")])

    assert report.written == [target]
    assert target.read_text(encoding="utf-8") == "mod ffi;\n"


def test_overwrites_generated_files(tmp_path):
    target = tmp_path / "ffi.rs"
    target.write_text("old\n")

    report = write_results(tmp_path, [GenerateResult(target, "new\n")])

    assert report.written == [target]
    assert target.read_text() == "new\n"


def test_existing_scaffold_is_kept_and_diverted(tmp_path):
    stub = tmp_path / "crates" / "lib" / "src" / "my_module_impl.rs"
    stub.parent.mkdir(parents=True)
    stub.write_text("user code\n")

    report = write_results(tmp_path, [GenerateResult(stub, "fresh stub\n", overwrite=False)])

    diverted = tmp_path / ".craby" / "my_module_impl.rs"
    assert stub.read_text() == "user code\n"
    assert diverted.read_text() == "fresh stub\n"
    assert report.preserved == [stub]
    assert report.diverted == [diverted]
    assert report.written == []


def test_missing_scaffold_is_written(tmp_path):
    stub = tmp_path / "my_module_impl.rs"

    report = write_results(tmp_path, [GenerateResult(stub, "stub\n", overwrite=False)])

    assert report.written == [stub]
    assert stub.read_text() == "stub\n"


def test_no_overwrite_diverts_every_existing_file(tmp_path):
    existing = tmp_path / "ffi.rs"
    existing.write_text("old\n")
    fresh = tmp_path / "generated.rs"

    report = write_results(
        tmp_path,
        [GenerateResult(existing, "new\n"), GenerateResult(fresh, "gen\n")],
        overwrite=False,
    )

    assert existing.read_text() == "old\n"
    assert (tmp_path / ".craby" / "ffi.rs").read_text() == "new\n"
    assert report.written == [fresh]
