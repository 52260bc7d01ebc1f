"""
Path-driven naming conventions.

Maps a file's position under module folders (``components``,
``layouts``, ``data`` ...) to the identifier it is expected to export.
Folder heuristics are literal table lookups.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

from .cases import capitalize_first, lower_first, to_camel, to_pascal

# Module folder -> suffix appended to the derived name
FOLDER_SUFFIXES: dict[str, str] = {
    "atoms": "",
    "components": "",
    "constants": "Constants",
    "contexts": "Context",
    "data": "Data",
    "layouts": "Layout",
    "pages": "Page",
    "providers": "Provider",
    "reducers": "Reducer",
    "services": "Service",
    "strings": "Strings",
    "theme": "Theme",
    "themes": "Theme",
    "views": "View",
}

# Folders whose exports must be functions returning JSX
JSX_FOLDERS = frozenset({"atoms", "components", "layouts", "pages", "providers", "views"})

# Folders whose exports are camelCase values
CAMEL_CASE_FOLDERS = frozenset({"constants", "data", "reducers", "services", "strings"})

# Organizational folders that never contribute a name segment
GROUPING_FOLDERS = frozenset({"shared", "common", "ui", "base", "general", "core"})

SOURCE_SUFFIX = re.compile(r"\.(jsx?|tsx?|mjs|cjs)$")


class NameKind(Enum):
    """What kind of declaration a derived name is for."""

    EXPORT = "export"
    HOOK = "hook"


def singularize(word: str) -> str:
    """Literal suffix-table singularization."""
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith(("ses", "xes", "zes")):
        return word[:-2]
    if word.endswith("s"):
        return word[:-1]
    return word


def split_path(path: Path | str) -> list[str]:
    """Path segments with forward slashes, drive letters ignored."""
    normalized = str(path).replace("\\", "/")
    return [part for part in PurePosixPath(normalized).parts if part not in ("/", "")]


def file_stem(path: Path | str) -> str:
    parts = split_path(path)
    return SOURCE_SUFFIX.sub("", parts[-1]) if parts else ""


def suffix_table(extra_folders: Iterable[str] = ()) -> dict[str, str]:
    """Folder suffix table extended with configured module folders."""
    table = dict(FOLDER_SUFFIXES)
    for folder in extra_folders:
        table.setdefault(folder, to_pascal(singularize(folder)))
    return table


@dataclass(frozen=True)
class ModuleInfo:
    """Position of a file under its innermost module folder."""

    folder: str
    suffix: str
    file_name: str
    intermediate: tuple[str, ...]

    @property
    def is_barrel(self) -> bool:
        """``views/index.ts`` style re-export files."""
        return self.file_name == "index" and not self.intermediate

    @property
    def is_camel_case(self) -> bool:
        return self.folder in CAMEL_CASE_FOLDERS

    @property
    def requires_jsx(self) -> bool:
        return self.folder in JSX_FOLDERS


def module_info(path: Path | str, extra_folders: Iterable[str] = ()) -> ModuleInfo | None:
    """Locate the innermost module folder above path, or None."""
    parts = split_path(path)
    if not parts:
        return None
    table = suffix_table(extra_folders)
    folders = parts[:-1]
    for index in range(len(folders) - 1, -1, -1):
        folder = folders[index]
        if folder in table:
            return ModuleInfo(
                folder=folder,
                suffix=table[folder],
                file_name=file_stem(path),
                intermediate=tuple(f for f in folders[index + 1 :] if f not in GROUPING_FOLDERS),
            )
    return None


def hook_name_for_file(path: Path | str) -> str | None:
    """camelCase hook name for a hook file (``use-create-user`` -> ``useCreateUser``)."""
    stem = file_stem(path)
    if not stem or stem == "index":
        return None
    name = to_camel(stem)
    if not name.startswith("use"):
        name = "use" + capitalize_first(name)
    return name


def derive_expected_name(
    path: Path | str,
    kind: NameKind = NameKind.EXPORT,
    extra_folders: Iterable[str] = (),
) -> str | None:
    """Expected identifier for a declaration living at path.

    The chain is the file name followed by the folders between it and
    the module folder, innermost first; index files contribute no
    segment. Each segment is Pascal-cased, then the module folder's
    suffix is appended. Camel-case folders lower the first letter.

    Example:
        >>> derive_expected_name("src/layouts/auth/index.tsx")
        'AuthLayout'
        >>> derive_expected_name("src/data/user-roles.js")
        'userRolesData'

    Returns:
        The expected name, or None when path is not under a module
        folder or is a module barrel.
    """
    if kind == NameKind.HOOK:
        return hook_name_for_file(path)

    info = module_info(path, extra_folders)
    if info is None or info.is_barrel:
        return None

    folders = list(reversed(info.intermediate))
    segments = folders if info.file_name == "index" else [info.file_name, *folders]
    if not segments:
        return None

    name = "".join(to_pascal(segment) for segment in segments) + info.suffix
    return lower_first(name) if info.is_camel_case else name
