"""ECMAScript version registry: the single source of truth for version identifiers.

Adding a new version:
  1. Add one VersionSpec to _VERSION_SPECS below (and its year alias).
  2. Add gated features for it in grammar/features.py, if any.
  3. That's it. resolve_profile() and the CLI pick it up automatically.
"""

from dataclasses import dataclass
from typing import Optional

from .exceptions import UnknownVersionError

# Baseline used when no version is supplied anywhere
DEFAULT_VERSION = "es5"


@dataclass(frozen=True)
class VersionSpec:
    """A named grammar level and all the identifiers that select it."""

    level: int
    aliases: tuple[str, ...]

    @property
    def name(self) -> str:
        """Canonical display name (year alias where one exists)."""
        return self.aliases[-1]


@dataclass(frozen=True)
class EcmaProfile:
    """Resolved grammar configuration used to judge one run.

    Only resolve_profile() builds these.
    """

    grammar_level: int
    module_mode: bool = False
    allow_directive_prefix: bool = False

    @property
    def source_type(self) -> str:
        return "module" if self.module_mode else "script"

    @property
    def name(self) -> str:
        return level_name(self.grammar_level)


# ── Version table ──────────────────────────────────────────────────

_VERSION_SPECS = (
    VersionSpec(3, ("es3",)),
    VersionSpec(4, ("es4",)),
    VersionSpec(5, ("es5",)),
    VersionSpec(6, ("es6", "es2015")),
    VersionSpec(7, ("es7", "es2016")),
    VersionSpec(8, ("es8", "es2017")),
    VersionSpec(9, ("es9", "es2018")),
    VersionSpec(10, ("es10", "es2019")),
    VersionSpec(11, ("es11", "es2020")),
    VersionSpec(12, ("es12", "es2021")),
    VersionSpec(13, ("es13", "es2022")),
    VersionSpec(14, ("es14", "es2023")),
    VersionSpec(15, ("es15", "es2024")),
)

VERSIONS: dict[str, VersionSpec] = {
    alias: spec for spec in _VERSION_SPECS for alias in spec.aliases
}

_SPECS_BY_LEVEL: dict[int, VersionSpec] = {spec.level: spec for spec in _VERSION_SPECS}

LATEST_LEVEL = max(_SPECS_BY_LEVEL)


def normalize_version(version: str) -> str:
    """Normalize a user-supplied identifier (``" ES2015 "`` -> ``"es2015"``)."""
    return str(version).strip().lower()


def get_version_spec(version: str) -> VersionSpec:
    """Look up a version identifier.

    Raises:
        UnknownVersionError: If the identifier is not in the table
    """
    spec = VERSIONS.get(normalize_version(version))
    if spec is None:
        raise UnknownVersionError(version, supported_versions())
    return spec


def resolve_profile(
    version: Optional[str] = None,
    module: bool = False,
    allow_hash_bang: bool = False,
) -> EcmaProfile:
    """Resolve a version identifier plus dialect flags into an EcmaProfile.

    Args:
        version: Version identifier such as "es6" or "es2016" (None = baseline)
        module: Use module grammar instead of script grammar
        allow_hash_bang: Tolerate a leading ``#!`` line

    Raises:
        UnknownVersionError: If the identifier is not in the table
    """
    spec = get_version_spec(DEFAULT_VERSION if version is None else version)
    return EcmaProfile(
        grammar_level=spec.level,
        module_mode=bool(module),
        allow_directive_prefix=bool(allow_hash_bang),
    )


def supported_versions() -> list[str]:
    """All accepted identifiers in table order."""
    return list(VERSIONS.keys())


def level_name(level: int) -> str:
    """Human name for a grammar level, e.g. 6 -> "es2015"."""
    spec = _SPECS_BY_LEVEL.get(level)
    return spec.name if spec is not None else f"ecmaVersion {level}"


def version_table() -> list[VersionSpec]:
    """Version specs ordered by grammar level."""
    return list(_VERSION_SPECS)
