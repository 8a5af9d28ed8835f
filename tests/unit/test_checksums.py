"""Tests for ChecksumValidator: symmetric manifest vs. disk cross-checks."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from pathlib import Path

from ocfltools.core.checksums import ChecksumValidator
from ocfltools.core.inventory import OcflObject
from ocfltools.core.inventory_io import load_inventory, write_inventory
from ocfltools.core.structure import StructuralValidator


def _check(root: Path, digest: str | None = None, inventory: OcflObject | None = None):
    validator = ChecksumValidator(StructuralValidator(root), inventory=inventory)
    return validator.verify_checksums(digest)


class TestChecksumValidator:
    def test_valid_object(self, object_root: Path):
        results = _check(object_root)
        assert not results.has_errors
        assert results.passes == {
            "verify_checksums": ["All 4 content files match their sha256 digests."]
        }

    def test_disk_files_listing(self, object_root: Path):
        validator = ChecksumValidator(StructuralValidator(object_root))
        assert validator.disk_files("content") == [
            "v1/content/a.txt",
            "v1/content/b.txt",
            "v2/content/a.txt",
            "v2/content/c/d.txt",
        ]

    def test_mismatch_reported_once(self, object_root: Path):
        (object_root / "v1" / "content" / "a.txt").write_bytes(b"tampered")
        results = _check(object_root)
        assert results.errors.keys() == {"checksum_mismatch"}
        mismatches = [f for f in results.findings if f.check == "checksum_mismatch"]
        assert [f.path for f in mismatches] == ["v1/content/a.txt"]

    def test_missing_file_reported_once(self, object_root: Path):
        (object_root / "v2" / "content" / "c" / "d.txt").unlink()
        results = _check(object_root)
        assert results.errors.keys() == {"missing_file"}
        assert [f.path for f in results.findings if f.check == "missing_file"] == [
            "v2/content/c/d.txt"
        ]

    def test_unlisted_file_on_disk(self, object_root: Path):
        (object_root / "v3" / "content" / "stowaway.txt").write_bytes(b"?")
        results = _check(object_root)
        assert results.errors == {
            "file_not_in_manifest": ["v3/content/stowaway.txt is on disk but not in the inventory"]
        }

    def test_uses_supplied_inventory(self, object_root: Path):
        inventory = load_inventory(object_root)
        inventory.add_file("new.txt", "f" * 64, 4)
        results = _check(object_root, inventory=inventory)
        assert [f.path for f in results.findings if f.check == "missing_file"] == [
            "v4/content/new.txt"
        ]

    def test_unreadable_inventory(self, object_root: Path):
        (object_root / "inventory.json").write_text("{broken")
        results = _check(object_root)
        assert "verify_checksums" in results.errors


class TestAlternateDigest:
    def test_fixity_algorithm_used_when_present(
        self, tmp_dir: Path, make_object_root: Callable[..., OcflObject]
    ):
        obj = make_object_root([{"a.txt": b"alpha"}])
        obj.add_fixity("md5", hashlib.md5(b"alpha").hexdigest(), "v1/content/a.txt")
        root = tmp_dir / "object"
        write_inventory(obj, root)
        results = _check(root, digest="md5")
        assert not results.has_errors
        assert "verify_checksums" in results.passes

    def test_fixity_mismatch(self, tmp_dir: Path, make_object_root: Callable[..., OcflObject]):
        obj = make_object_root([{"a.txt": b"alpha"}])
        obj.add_fixity("md5", hashlib.md5(b"other").hexdigest(), "v1/content/a.txt")
        root = tmp_dir / "object"
        write_inventory(obj, root)
        results = _check(root, digest="md5")
        assert results.errors.keys() == {"checksum_mismatch"}

    def test_algorithm_without_fixity_block_fails_outright(self, object_root: Path):
        results = _check(object_root, digest="sha1")
        assert results.error_count == 1
        assert "verify_checksums" in results.errors
        assert not results.passes

    def test_partial_fixity_block(
        self, tmp_dir: Path, make_object_root: Callable[..., OcflObject]
    ):
        obj = make_object_root([{"a.txt": b"alpha", "b.txt": b"bravo"}])
        obj.add_fixity("md5", hashlib.md5(b"alpha").hexdigest(), "v1/content/a.txt")
        root = tmp_dir / "object"
        write_inventory(obj, root)
        results = _check(root, digest="md5")
        assert not results.has_errors
        assert results.warnings == {
            "no_fixity_digest": ["v1/content/b.txt has no md5 digest in the fixity block"]
        }
        assert results.passes == {
            "verify_checksums": ["All 1 content files match their md5 digests."]
        }

    def test_partial_fixity_still_flags_unlisted_and_missing(
        self, tmp_dir: Path, make_object_root: Callable[..., OcflObject]
    ):
        obj = make_object_root([{"a.txt": b"alpha", "b.txt": b"bravo"}])
        obj.add_fixity("md5", hashlib.md5(b"alpha").hexdigest(), "v1/content/a.txt")
        root = tmp_dir / "object"
        write_inventory(obj, root)
        (root / "v1" / "content" / "b.txt").unlink()
        (root / "v1" / "content" / "extra.txt").write_bytes(b"?")
        results = _check(root, digest="md5")
        assert results.errors.keys() == {"file_not_in_manifest", "missing_file"}
        assert [f.path for f in results.findings if f.check == "missing_file"] == [
            "v1/content/b.txt"
        ]


class TestUnreadableContent:
    def test_dangling_symlink_is_reported_and_walk_continues(self, object_root: Path):
        target = object_root / "v1" / "content" / "a.txt"
        target.unlink()
        target.symlink_to(object_root / "gone.txt")
        (object_root / "v2" / "content" / "c" / "d.txt").write_bytes(b"tampered")
        results = _check(object_root)
        assert results.errors.keys() == {"unreadable_file", "checksum_mismatch"}
        assert [f.path for f in results.findings if f.check == "unreadable_file"] == [
            "v1/content/a.txt"
        ]
        assert "symlinked_content" in results.warnings

    def test_directory_symlink_loop_does_not_recurse(self, object_root: Path):
        (object_root / "v1" / "content" / "loop").symlink_to(
            object_root / "v1", target_is_directory=True
        )
        results = _check(object_root)
        assert results.errors.keys() == {"file_not_in_manifest"}
        assert [f.path for f in results.findings if f.check == "file_not_in_manifest"] == [
            "v1/content/loop"
        ]

    def test_unsupported_fixity_algorithm_still_checks_presence(self, object_root: Path):
        inventory = load_inventory(object_root)
        inventory.add_fixity("crc32", "0badc0de", "v1/content/a.txt")
        (object_root / "v1" / "content" / "b.txt").unlink()
        results = _check(object_root, digest="crc32", inventory=inventory)
        assert results.errors.keys() == {"verify_checksums", "missing_file"}
        assert results.error_count == 2
