"""Tests for StructuralValidator: layout checks and version-format inference."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from pathlib import Path

import pytest

from ocfltools.config import OcflConfig
from ocfltools.core.errors import FormatInferenceError
from ocfltools.core.inventory import OcflObject
from ocfltools.core.structure import StructuralValidator
from ocfltools.models.versioning import VersionFormat


def _validate(root: Path, config: OcflConfig | None = None) -> StructuralValidator:
    validator = StructuralValidator(root, config=config or OcflConfig(version_format="v%d"))
    validator.verify_structure()
    return validator


class TestVersionFormatInference:
    def test_unpadded(self, object_root: Path):
        validator = StructuralValidator(object_root)
        assert validator.infer_version_format() == VersionFormat(padding=0)

    def test_padded(self, tmp_dir: Path, make_object_root: Callable[..., OcflObject]):
        make_object_root([{"a.txt": b"a"}, {"b.txt": b"b"}], version_format="v%04d")
        validator = _validate(tmp_dir / "object")
        assert validator.version_format.padding == 4
        assert validator.version_format.format(2) == "v0002"
        assert not validator.results.has_errors

    def test_no_version_directories(self, tmp_dir: Path):
        with pytest.raises(FormatInferenceError):
            StructuralValidator(tmp_dir).infer_version_format()

    def test_inference_failure_falls_back_to_default(self, object_root: Path):
        shutil.rmtree(object_root / "v1")
        validator = _validate(object_root, OcflConfig(version_format="v%d"))
        assert validator.version_format == VersionFormat(padding=0)
        assert "version_format" in validator.results.errors
        assert "version_format" in validator.results.warnings
        # The remaining checks still ran
        assert any("v1 is missing" in m for m in validator.results.errors["root_directories"])

    def test_unusable_default_format_raises(self, tmp_dir: Path):
        with pytest.raises(FormatInferenceError):
            _validate(tmp_dir, OcflConfig(version_format="version-%d"))


class TestRootChecks:
    def test_valid_object_passes(self, object_root: Path):
        results = _validate(object_root).results
        assert not results.has_errors
        assert results.passes == {
            "verify_structure": [f"OCFL object root {object_root} passed structural validation."]
        }

    def test_missing_required_files(self, object_root: Path):
        (object_root / "0=ocfl_object_1.0").unlink()
        (object_root / "inventory.json.sha256").unlink()
        results = _validate(object_root).results
        codes = {f.code for f in results.findings if f.check == "root_files"}
        assert codes == {"E003", "E058"}
        assert not results.passes

    def test_sidecar_name_follows_sniffed_algorithm(self, object_root: Path):
        inventory = object_root / "inventory.json"
        inventory.write_text(inventory.read_text().replace('"sha256"', '"sha512"'))
        results = _validate(object_root).results
        messages = results.errors["root_files"]
        assert any("inventory.json.sha512 not found" in m for m in messages)
        assert any("Unexpected file in object root: inventory.json.sha256" in m for m in messages)

    def test_malformed_inventory_still_sniffed(self, object_root: Path):
        inventory = object_root / "inventory.json"
        inventory.write_text(inventory.read_text()[:200])
        validator = _validate(object_root)
        assert validator.sniff_inventory()[0] == "sha256"
        assert "root_files" not in validator.results.errors

    def test_unexpected_root_file(self, object_root: Path):
        (object_root / "README.txt").write_text("hi")
        results = _validate(object_root).results
        assert results.errors == {"root_files": ["Unexpected file in object root: README.txt"]}

    def test_logs_directory_is_a_warning(self, object_root: Path):
        (object_root / "logs").mkdir()
        results = _validate(object_root).results
        assert not results.has_errors
        assert "root_directories" in results.warnings

    def test_non_version_directory(self, object_root: Path):
        (object_root / "extra").mkdir()
        (object_root / "v01").mkdir()
        results = _validate(object_root).results
        assert len(results.errors["root_directories"]) == 2


class TestVersionContiguity:
    def test_missing_middle_version(
        self, tmp_dir: Path, make_object_root: Callable[..., OcflObject]
    ):
        make_object_root(
            [{"a.txt": b"1"}, {"b.txt": b"2"}, {"c.txt": b"3"}, {"d.txt": b"4"}]
        )
        root = tmp_dir / "object"
        shutil.rmtree(root / "v3")
        results = _validate(root).results
        assert results.errors == {
            "root_directories": ["Expected version directory v3 is missing"]
        }
        assert [f.path for f in results.findings if f.code == "E010"] == ["v3"]

    def test_version_directories_sorted_numerically(
        self, tmp_dir: Path, make_object_root: Callable[..., OcflObject]
    ):
        make_object_root([{f"f{n}.txt": str(n).encode()} for n in range(1, 12)])
        validator = StructuralValidator(tmp_dir / "object")
        dirs = validator.version_directories()
        assert dirs[:3] == ["v1", "v2", "v3"]
        assert dirs[-1] == "v11"


class TestVersionDirectoryChecks:
    def test_missing_version_inventory_is_warning(
        self, tmp_dir: Path, make_object_root: Callable[..., OcflObject]
    ):
        make_object_root([{"a.txt": b"a"}], version_inventories=False)
        results = _validate(tmp_dir / "object").results
        assert not results.has_errors
        assert len(results.warnings["version_directory"]) == 2

    def test_unexpected_file_in_version_directory(self, object_root: Path):
        (object_root / "v1" / "notes.txt").write_text("stray")
        results = _validate(object_root).results
        assert results.errors == {
            "version_directory": ["Unexpected file notes.txt in version directory v1"]
        }

    def test_missing_content_directory(self, object_root: Path):
        shutil.rmtree(object_root / "v3" / "content")
        results = _validate(object_root).results
        assert results.errors == {
            "version_directory": ["Version directory v3 has no content directory"]
        }

    def test_extra_directory_in_version(self, object_root: Path):
        (object_root / "v2" / "data").mkdir()
        results = _validate(object_root).results
        assert results.errors == {
            "version_directory": ["Unexpected directory data in version directory v2"]
        }
