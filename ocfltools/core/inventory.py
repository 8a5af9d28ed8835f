"""In-memory OCFL inventory: manifest, versions and fixity.

Enforces:
- Versions are contiguous 1..head; only head may be edited
- The manifest is append-only; a digest keeps its first physical path
- A logical path maps to at most one digest within a version's state
- Every digest in a state block exists in the manifest

Versions are created only through ``get_or_create_version`` (or a
mutating call that goes through it). Plain lookups never create history.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone

from ocfltools.config import OcflConfig
from ocfltools.core.errors import (
    AmbiguousStateError,
    ImmutableVersionError,
    InventoryStateError,
    NotFoundError,
    VersionSequenceError,
)
from ocfltools.core.pathset import PathSet
from ocfltools.models.inventory import UserRecord
from ocfltools.models.versioning import VersionFormat

logger = logging.getLogger(__name__)


class Version:
    """One version block: metadata plus its state (digest -> logical paths)."""

    def __init__(
        self,
        number: int,
        state: dict[str, PathSet] | None = None,
        *,
        created: str = "",
        message: str = "",
        user: UserRecord | None = None,
    ) -> None:
        self.number = number
        self.created = created
        self.message = message
        self.user = user or UserRecord()
        self.state: dict[str, PathSet] = state if state is not None else {}

    def copy_state(self) -> dict[str, PathSet]:
        """Deep copy of the state block."""
        return {digest: paths.copy() for digest, paths in self.state.items()}

    def file_index(self) -> dict[str, str]:
        """Invert the state block into logical path -> digest."""
        return {
            filepath: digest
            for digest, filepaths in self.state.items()
            for filepath in filepaths
        }

    def __repr__(self) -> str:
        return f"Version(number={self.number}, digests={len(self.state)})"


class OcflObject:
    """The inventory of a single OCFL object.

    Parameters
    ----------
    object_id:
        The object's identifier.
    config:
        Defaults for digest algorithm, content directory and version
        format. A fresh ``OcflConfig()`` is used when omitted.

    Not safe for concurrent mutation; callers must serialize writes.
    """

    def __init__(
        self, object_id: str | None = None, *, config: OcflConfig | None = None
    ) -> None:
        cfg = config or OcflConfig()
        self.id = object_id
        self.type = cfg.content_type
        self.digest_algorithm = cfg.digest_algorithm
        self.content_directory = cfg.content_directory
        self.version_format = VersionFormat.from_template(cfg.version_format)
        self.manifest: dict[str, PathSet] = {}
        self.fixity: dict[str, dict[str, PathSet]] = {}
        self._versions: dict[int, Version] = {}

    # ------------------------------------------------------------------
    # Head and version bookkeeping
    # ------------------------------------------------------------------

    @property
    def head(self) -> int:
        """Highest version number, 0 when no version exists yet."""
        return max(self._versions, default=0)

    @property
    def head_token(self) -> str:
        if not self._versions:
            raise NotFoundError(f"Object {self.id} has no versions")
        return self.version_format.format(self.head)

    def version_id_list(self) -> list[int]:
        """All version numbers, ascending."""
        return sorted(self._versions)

    def versions(self) -> list[Version]:
        return [self._versions[n] for n in self.version_id_list()]

    def has_version(self, version: int) -> bool:
        return version in self._versions

    def get_version(self, version: int) -> Version:
        """Return an existing version. Never creates one."""
        try:
            return self._versions[version]
        except KeyError:
            raise NotFoundError(f"Version {version} does not exist") from None

    def get_or_create_version(self, version: int) -> Version:
        """Return ``version``, materializing it if it is the next one.

        A new version starts with a deep copy of the prior version's state,
        or an empty state for version 1. Creating it freezes the old head.
        """
        if version in self._versions:
            return self._versions[version]

        expected = self.head + 1
        if version != expected:
            raise VersionSequenceError(
                f"Cannot create version {version}: next version is {expected}"
            )
        limit = self.version_format.max_version
        if limit is not None and version > limit:
            raise VersionSequenceError(
                f"Version {version} does not fit format {self.version_format.template}"
            )

        prior = self._versions.get(version - 1)
        state = prior.copy_state() if prior is not None else {}
        new_version = Version(version, state)
        self._versions[version] = new_version
        logger.info(
            "Materialized version %s of object %s (%d digests inherited).",
            self.version_format.format(version), self.id, len(state),
        )
        return new_version

    def _require_head(self, version: int) -> None:
        if version != self.head:
            raise ImmutableVersionError(
                f"Can't edit prior versions! Only version {self.head} can be modified now, "
                f"not version {version}."
            )

    def _writable_version(self, version: int) -> Version:
        """Resolve a mutation target, checking immutability before anything else."""
        if version in self._versions:
            self._require_head(version)
            return self._versions[version]
        return self.get_or_create_version(version)

    # ------------------------------------------------------------------
    # Version metadata
    # ------------------------------------------------------------------

    def set_version_message(self, version: int, message: str) -> None:
        target = self.get_version(version)
        self._require_head(version)
        target.message = message

    def get_version_message(self, version: int) -> str:
        return self.get_version(version).message

    def set_version_user(
        self, version: int, user: UserRecord | Mapping[str, str]
    ) -> None:
        """Set the user block; ``user`` needs ``name`` and ``address``."""
        target = self.get_version(version)
        self._require_head(version)
        target.user = UserRecord.model_validate(user)

    def get_version_user(self, version: int) -> UserRecord:
        return self.get_version(version).user

    def set_version_created(
        self, version: int, created: datetime | str | None = None
    ) -> str:
        """Stamp the creation time (defaults to now, UTC) and return it."""
        target = self.get_version(version)
        self._require_head(version)
        if created is None:
            created = datetime.now(timezone.utc)
        if isinstance(created, datetime):
            created = created.isoformat(timespec="seconds").replace("+00:00", "Z")
        target.created = created
        return created

    def get_version_created(self, version: int) -> str:
        return self.get_version(version).created

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    def get_state(self, version: int) -> dict[str, list[str]]:
        """Copy of a version's state block as plain lists."""
        return {
            digest: paths.to_list()
            for digest, paths in self.get_version(version).state.items()
        }

    def set_state(self, version: int, state: Mapping[str, Iterable[str]]) -> None:
        """Replace a version's state wholesale.

        Prefer the file operations. The new state must only use digests
        already in the manifest and must not list a path under two digests.
        """
        target = self._writable_version(version)
        new_state: dict[str, PathSet] = {}
        owner: dict[str, str] = {}
        for digest, filepaths in state.items():
            if digest not in self.manifest:
                raise InventoryStateError(
                    f"Digest {digest} is not in the manifest of object {self.id}"
                )
            paths = PathSet(filepaths)
            for filepath in paths:
                if owner.setdefault(filepath, digest) != digest:
                    raise AmbiguousStateError(
                        f"{filepath} is listed under both {owner[filepath]} and {digest}"
                    )
            if paths:
                new_state[digest] = paths
        target.state = new_state

    def set_version(self, version: int, record: Version) -> None:
        """Install a complete version block, e.g. when loading an inventory.

        ``version`` must be the current head (replacing it) or the next
        number. Its state is checked like ``set_state``.
        """
        if version not in (self.head, self.head + 1) or version < 1:
            raise VersionSequenceError(
                f"Cannot set version {version}: head is {self.head}"
            )
        pending = Version(
            version,
            created=record.created,
            message=record.message,
            user=record.user,
        )
        previous = self._versions.get(version)
        self._versions[version] = pending
        try:
            self.set_state(version, record.state)
        except Exception:
            if previous is None:
                del self._versions[version]
            else:
                self._versions[version] = previous
            raise

    # ------------------------------------------------------------------
    # File operations
    # ------------------------------------------------------------------

    def add_file(self, file: str, digest: str, version: int) -> dict[str, list[str]]:
        """Add a logical file with the given digest to ``version``.

        Adding a file already present under the same digest is a no-op.
        Raises AmbiguousStateError if the file exists under another digest;
        use ``update_file`` for that.
        """
        target = self._writable_version(version)
        current = target.file_index().get(file)
        if current is not None and current != digest:
            raise AmbiguousStateError(
                f"{file} already exists with digest {current} in version {version}. "
                f"Consider update_file instead."
            )
        target.state.setdefault(digest, PathSet()).add(file)
        self._update_manifest(file, digest, version)
        logger.debug("add %s (%s) to version %d", file, digest, version)
        return self.get_state(version)

    def update_file(self, file: str, digest: str, version: int) -> dict[str, list[str]]:
        """Point an existing logical file at a new digest (delete then add)."""
        target = self._writable_version(version)
        if file in target.file_index():
            self.delete_file(file, version)
        return self.add_file(file, digest, version)

    def _update_manifest(self, file: str, digest: str, version: int) -> PathSet:
        # Append-only: a known digest keeps its original physical path.
        if digest in self.manifest:
            return self.manifest[digest]
        physical = (
            f"{self.version_format.format(version)}/{self.content_directory}/{file}"
        )
        self.manifest[digest] = PathSet([physical])
        return self.manifest[digest]

    def delete_file(self, file: str, version: int) -> dict[str, list[str]]:
        """Remove one logical path. The digest stays in the manifest."""
        target = self._writable_version(version)
        digest = self.get_digest(file, version)
        paths = target.state[digest]
        paths.discard(file)
        if not paths:
            del target.state[digest]
        logger.debug("delete %s (%s) from version %d", file, digest, version)
        return self.get_state(version)

    def copy_file(
        self, source_file: str, destination_file: str, version: int
    ) -> dict[str, list[str]]:
        """Alias ``destination_file`` to the digest of ``source_file``.

        An existing destination is overwritten.
        """
        target = self._writable_version(version)
        digest = self.get_digest(source_file, version)
        if destination_file == source_file:
            return self.get_state(version)
        if destination_file in target.file_index():
            self.delete_file(destination_file, version)
        return self.add_file(destination_file, digest, version)

    def move_file(
        self, old_file: str, new_file: str, version: int
    ) -> dict[str, list[str]]:
        """Rename a logical file: copy then delete the old path."""
        self.copy_file(old_file, new_file, version)
        if new_file == old_file:
            return self.get_state(version)
        return self.delete_file(old_file, version)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_digest(self, file: str, version: int) -> str:
        index = self.get_version(version).file_index()
        try:
            return index[file]
        except KeyError:
            raise NotFoundError(
                f"{file} does not exist in version {version}"
            ) from None

    def get_files(self, version: int) -> dict[str, str]:
        """Logical path -> physical path (relative to the object root)."""
        return {
            filepath: self.manifest[digest].first()
            for digest, filepaths in self.get_version(version).state.items()
            for filepath in filepaths
        }

    def get_current_files(self) -> dict[str, str]:
        if not self._versions:
            raise NotFoundError(f"Object {self.id} has no versions")
        return self.get_files(self.head)

    def manifest_index(self) -> dict[str, str]:
        """Invert the manifest into physical path -> digest."""
        return {
            path: digest
            for digest, paths in self.manifest.items()
            for path in paths
        }

    # ------------------------------------------------------------------
    # Fixity
    # ------------------------------------------------------------------

    def add_fixity(self, algorithm: str, alt_digest: str, path: str) -> None:
        """Record an additional digest for a manifest path (append-only)."""
        block = self.fixity.setdefault(algorithm, {})
        block.setdefault(alt_digest, PathSet()).add(path)

    def fixity_for(self, algorithm: str) -> dict[str, list[str]]:
        try:
            block = self.fixity[algorithm]
        except KeyError:
            raise NotFoundError(
                f"No {algorithm} fixity block in object {self.id}"
            ) from None
        return {digest: paths.to_list() for digest, paths in block.items()}

    def fixity_index(self, algorithm: str) -> dict[str, str]:
        """Invert one fixity block into path -> alternate digest."""
        return {
            path: digest
            for digest, paths in self.fixity_for(algorithm).items()
            for path in paths
        }
