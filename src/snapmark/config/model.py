# topmark:header:start
#
#   project      : SnapMark
#   file         : model.py
#   file_relpath : src/snapmark/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration model and merge policy.

This module defines:
    - `Config`: an immutable, runtime snapshot used by the snapshot session.
    - `MutableConfig`: a mutable builder used during discovery/merge; it
      can be frozen into `Config` and thawed back for edits.

Merge order (lowest to highest precedence):
    1) Built-in defaults (`snapmark.config.io.load_defaults_dict`)
    2) Project configs discovered upward, root-most first; within a directory
       `pyproject.toml` (``[tool.snapmark]``) is merged before `snapmark.toml`
    3) Extra config files passed explicitly (``--config``)
    4) Runtime overrides (CLI flags, pytest options) via `MutableConfig.apply_overrides`

Unset fields are ``None`` on the builder so a later layer only overrides what
it actually declares.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from snapmark.config.io import (
    get_bool_value_or_none,
    get_string_value_or_none,
    get_table_value,
    load_defaults_dict,
    load_toml_dict,
)
from snapmark.config.keys import Toml
from snapmark.config.logging import SnapmarkLogger, get_logger
from snapmark.constants import (
    DEFAULT_SNAPSHOT_DIR,
    DEFAULT_SNAPSHOT_SUFFIX,
    PYPROJECT_TOML_NAME,
    PYPROJECT_TOOL_SECTION,
    SNAPMARK_TOML_NAME,
)

# ArgsLike: generic mapping accepted by `apply_overrides` (CLI namespaces, pytest options, dicts).
ArgsLike = Mapping[str, Any]

logger: SnapmarkLogger = get_logger(__name__)


@dataclass(frozen=True)
class Config:
    """Immutable runtime configuration for SnapMark.

    Attributes:
        snapshot_dir (str): Name of the snapshot directory next to each test file.
        snapshot_suffix (str): Suffix appended to the test file name.
        update (bool): Update mode: rewrite mismatches and prune obsolete snapshots.
        report_obsolete (bool): Report obsolete snapshots outside update mode.
        remove_orphans (bool): Delete snapshot files whose test file is gone.
        config_files (tuple[Path | str, ...]): Config sources used, in merge order.
        diagnostics (tuple[str, ...]): Warnings collected while loading and sanitizing.
    """

    snapshot_dir: str = DEFAULT_SNAPSHOT_DIR
    snapshot_suffix: str = DEFAULT_SNAPSHOT_SUFFIX
    update: bool = False
    report_obsolete: bool = False
    remove_orphans: bool = True
    config_files: tuple[Path | str, ...] = ()
    diagnostics: tuple[str, ...] = ()

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this configuration."""
        return MutableConfig(
            snapshot_dir=self.snapshot_dir,
            snapshot_suffix=self.snapshot_suffix,
            update=self.update,
            report_obsolete=self.report_obsolete,
            remove_orphans=self.remove_orphans,
            config_files=list(self.config_files),
            diagnostics=list(self.diagnostics),
        )


@dataclass
class MutableConfig:
    """Mutable configuration used during discovery and merging.

    Attributes:
        snapshot_dir (str | None): Snapshot directory name; None = inherit.
        snapshot_suffix (str | None): Snapshot file suffix; None = inherit.
        update (bool | None): Update mode; None = inherit.
        report_obsolete (bool | None): Obsolete reporting; None = inherit.
        remove_orphans (bool | None): Orphan removal; None = inherit.
        config_files (list[Path | str]): Config sources used, in merge order.
        diagnostics (list[str]): Warnings collected while loading and sanitizing.
    """

    snapshot_dir: str | None = None
    snapshot_suffix: str | None = None
    update: bool | None = None
    report_obsolete: bool | None = None
    remove_orphans: bool | None = None

    # Provenance
    config_files: list[Path | str] = field(default_factory=lambda: [])

    diagnostics: list[str] = field(default_factory=lambda: [])

    # ---------------------------- Build/freeze ----------------------------
    def freeze(self) -> Config:
        """Sanitize and freeze this builder into an immutable `Config`."""
        self.sanitize()
        defaults = Config()
        return Config(
            snapshot_dir=self.snapshot_dir or defaults.snapshot_dir,
            snapshot_suffix=self.snapshot_suffix or defaults.snapshot_suffix,
            update=self.update if self.update is not None else defaults.update,
            report_obsolete=self.report_obsolete
            if self.report_obsolete is not None
            else defaults.report_obsolete,
            remove_orphans=self.remove_orphans
            if self.remove_orphans is not None
            else defaults.remove_orphans,
            config_files=tuple(self.config_files),
            diagnostics=tuple(self.diagnostics),
        )

    def _warn(self, message: str) -> None:
        logger.warning("%s", message)
        self.diagnostics.append(message)

    def sanitize(self) -> None:
        """Replace invalid values with defaults, recording a diagnostic for each."""
        if self.snapshot_dir is not None:
            name: str = self.snapshot_dir.strip()
            if name in ("", ".", "..") or "/" in name or "\\" in name:
                self._warn(
                    f"Invalid {Toml.KEY_SNAPSHOT_DIR} {self.snapshot_dir!r}: "
                    f"must be a plain directory name; using {DEFAULT_SNAPSHOT_DIR!r}"
                )
                self.snapshot_dir = DEFAULT_SNAPSHOT_DIR
        if self.snapshot_suffix is not None:
            if not self.snapshot_suffix.startswith(".") or len(self.snapshot_suffix) < 2:
                self._warn(
                    f"Invalid {Toml.KEY_SNAPSHOT_SUFFIX} {self.snapshot_suffix!r}: "
                    f"must start with '.'; using {DEFAULT_SNAPSHOT_SUFFIX!r}"
                )
                self.snapshot_suffix = DEFAULT_SNAPSHOT_SUFFIX

    # --------------------------- Loaders/parsers --------------------------
    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Return a builder populated with the runtime defaults."""
        return cls.from_toml_dict(load_defaults_dict(), config_file=None)

    @classmethod
    def from_toml_dict(cls, data: Mapping[str, Any], *, config_file: Path | None) -> MutableConfig:
        """Build a draft from a flat SnapMark TOML table.

        Args:
            data (Mapping[str, Any]): Top-level table of ``snapmark.toml`` or
                the ``[tool.snapmark]`` table of ``pyproject.toml``.
            config_file (Path | None): Source file, for diagnostics and provenance.

        Returns:
            MutableConfig: The parsed draft; unknown keys are reported and ignored.
        """
        table: dict[str, Any] = dict(data)
        draft = cls(
            snapshot_dir=get_string_value_or_none(table, Toml.KEY_SNAPSHOT_DIR),
            snapshot_suffix=get_string_value_or_none(table, Toml.KEY_SNAPSHOT_SUFFIX),
            update=get_bool_value_or_none(table, Toml.KEY_UPDATE),
            report_obsolete=get_bool_value_or_none(table, Toml.KEY_REPORT_OBSOLETE),
            remove_orphans=get_bool_value_or_none(table, Toml.KEY_REMOVE_ORPHANS),
        )
        unknown: list[str] = sorted(set(table) - Toml.all_keys())
        for key in unknown:
            where: str = f" in {config_file}" if config_file else ""
            draft._warn(f"Unknown configuration key '{key}'{where}")
        return draft

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableConfig | None:
        """Load configuration from a single TOML file.

        Supports both ``snapmark.toml`` and ``pyproject.toml`` (``[tool.snapmark]``).

        Args:
            path (Path): Path to the TOML file.

        Returns:
            MutableConfig | None: The draft, or None when ``pyproject.toml`` has
            no ``[tool.snapmark]`` table.
        """
        logger.debug("Creating MutableConfig from TOML config: %s", path)
        toml_data: dict[str, Any] = load_toml_dict(path)

        if path.name == PYPROJECT_TOML_NAME:
            tool_section: dict[str, Any] = get_table_value(
                get_table_value(toml_data, "tool"), PYPROJECT_TOOL_SECTION
            )
            if not tool_section:
                logger.debug("[tool.%s] section missing in %s", PYPROJECT_TOOL_SECTION, path)
                return None
            toml_data = tool_section

        draft: MutableConfig = cls.from_toml_dict(toml_data, config_file=path)
        draft.config_files = [path]
        logger.debug("Generated MutableConfig: %s", draft)
        return draft

    @classmethod
    def discover_local_config_files(cls, start: Path) -> list[Path]:
        """Return config files discovered by walking upward from ``start``.

        Files are returned root-most first, nearest last; within one directory
        ``pyproject.toml`` precedes ``snapmark.toml`` so the latter wins on merge.
        A config declaring ``root = true`` stops the walk after its directory.

        Args:
            start (Path): The directory (or file) where discovery starts.

        Returns:
            list[Path]: Discovered config file paths ordered for stable merging.
        """
        per_dir: list[list[Path]] = []
        cur: Path = start.resolve()
        if cur.is_file():
            cur = cur.parent

        while True:
            root_stop_here = False
            dir_entries: list[Path] = []
            for name in (PYPROJECT_TOML_NAME, SNAPMARK_TOML_NAME):
                p: Path = cur / name
                if not p.is_file():
                    continue
                data: dict[str, Any] = load_toml_dict(p)
                if name == PYPROJECT_TOML_NAME:
                    data = get_table_value(get_table_value(data, "tool"), PYPROJECT_TOOL_SECTION)
                    if not data:
                        continue
                dir_entries.append(p)
                logger.debug("Discovered config file: %s", p)
                if data.get(Toml.KEY_ROOT) is True:
                    root_stop_here = True

            if dir_entries:
                per_dir.append(dir_entries)

            parent: Path = cur.parent
            if parent == cur:
                break
            if root_stop_here:
                logger.debug("Stopping upward config discovery at %s due to root=true", cur)
                break
            cur = parent

        ordered: list[Path] = []
        for dir_list in reversed(per_dir):
            ordered.extend(dir_list)
        return ordered

    @classmethod
    def load_merged(
        cls,
        *,
        anchor: Path | None = None,
        extra_config_files: Iterable[Path] | None = None,
        no_config: bool = False,
    ) -> MutableConfig:
        """Discover and merge configuration layers into a draft.

        Args:
            anchor (Path | None): Directory (or file) where upward discovery
                starts; defaults to the current working directory.
            extra_config_files (Iterable[Path] | None): Files merged after
                discovery, in the given order.
            no_config (bool): If True, skip project discovery.

        Returns:
            MutableConfig: A draft ready to be overridden and frozen.
        """
        draft: MutableConfig = cls.from_defaults()
        start: Path = anchor or Path.cwd()

        if not no_config:
            for cfg_path in cls.discover_local_config_files(start):
                mc: MutableConfig | None = cls.from_toml_file(cfg_path)
                if mc is not None:
                    draft = draft.merge_with(mc)

        for extra in extra_config_files or ():
            mc = cls.from_toml_file(Path(extra))
            if mc is not None:
                draft = draft.merge_with(mc)

        return draft

    # ------------------------------- Merging -------------------------------
    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new draft where values set on ``other`` override this draft."""
        return MutableConfig(
            snapshot_dir=other.snapshot_dir
            if other.snapshot_dir is not None
            else self.snapshot_dir,
            snapshot_suffix=other.snapshot_suffix
            if other.snapshot_suffix is not None
            else self.snapshot_suffix,
            update=other.update if other.update is not None else self.update,
            report_obsolete=other.report_obsolete
            if other.report_obsolete is not None
            else self.report_obsolete,
            remove_orphans=other.remove_orphans
            if other.remove_orphans is not None
            else self.remove_orphans,
            config_files=self.config_files + other.config_files,
            diagnostics=self.diagnostics + other.diagnostics,
        )

    def apply_overrides(self, args: ArgsLike) -> MutableConfig:
        """Apply runtime overrides in place and return ``self``.

        Only keys present in ``args`` with a non-``None`` value override the
        draft, so an unset CLI flag never masks a config file value.

        Args:
            args (ArgsLike): Mapping keyed by TOML key names.

        Returns:
            MutableConfig: This draft.
        """
        for key in (Toml.KEY_SNAPSHOT_DIR, Toml.KEY_SNAPSHOT_SUFFIX):
            value: Any = args.get(key)
            if value is not None:
                setattr(self, key, str(value))
        for key in (Toml.KEY_UPDATE, Toml.KEY_REPORT_OBSOLETE, Toml.KEY_REMOVE_ORPHANS):
            value = args.get(key)
            if value is not None:
                setattr(self, key, bool(value))
        return self


def load_config(
    *,
    anchor: Path | None = None,
    extra_config_files: Iterable[Path] | None = None,
    no_config: bool = False,
    overrides: ArgsLike | None = None,
) -> Config:
    """Discover, merge, override and freeze the configuration in one call."""
    draft: MutableConfig = MutableConfig.load_merged(
        anchor=anchor,
        extra_config_files=extra_config_files,
        no_config=no_config,
    )
    if overrides:
        draft.apply_overrides(overrides)
    return draft.freeze()
