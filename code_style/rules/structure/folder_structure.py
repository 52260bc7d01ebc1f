"""
Folder structure consistency rule.

Items inside a module folder (atoms, components, hooks ...) are either
all direct files (``atoms/input.tsx``) or all wrapped in folders
(``atoms/input/index.tsx``). Wrapping is only justified when at least
one wrapper folder holds two or more code files. Loose module files
(``src/data.js`` instead of ``src/data/``) are flagged too.

The only I/O is listing immediate children through the context's
FileSystem; unreadable folders yield no opinion.
"""

import re
from pathlib import Path

from pydantic import Field

from ...fs import DirectoryEntry
from ...naming.paths import file_stem, split_path
from ..base import BaseRule, Finding, RuleContext, RuleOptions, Severity

CODE_FILE = re.compile(r"\.(tsx?|jsx?)$")

MODULE_FOLDERS = (
    "actions",
    "apis",
    "assets",
    "atoms",
    "components",
    "config",
    "configs",
    "constants",
    "contexts",
    "data",
    "enums",
    "helpers",
    "hooks",
    "interfaces",
    "layouts",
    "lib",
    "middlewares",
    "molecules",
    "organisms",
    "pages",
    "providers",
    "reducers",
    "redux",
    "requests",
    "routes",
    "schemas",
    "sections",
    "services",
    "store",
    "strings",
    "styles",
    "theme",
    "thunks",
    "types",
    "ui",
    "utils",
    "utilities",
    "views",
    "widgets",
)


class FolderStructureOptions(RuleOptions):
    # Replaces the default module folder list
    module_folders: list[str] | None = None
    extra_module_folders: list[str] = Field(default_factory=list)


class FolderStructureRule(BaseRule):
    """Flat vs wrapped module folders."""

    options_model = FolderStructureOptions

    @property
    def rule_id(self) -> str:
        return "STRUCTURE.FOLDER_STRUCTURE"

    @property
    def name(self) -> str:
        return "Folder Structure Consistency"

    @property
    def category(self) -> str:
        return "structure"

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def description(self) -> str:
        return (
            "Module folders must be consistently flat or consistently wrapped; "
            "wrapping is only justified when a wrapper holds several files."
        )

    def _module_folders(self, context: RuleContext) -> list[str]:
        options = self.options(context)
        if options.module_folders:
            return list(options.module_folders)
        return [*MODULE_FOLDERS, *options.extra_module_folders]

    def check(self, context: RuleContext) -> list[Finding]:
        module_folders = self._module_folders(context)
        parts = split_path(context.file_path)
        folders = parts[:-1]

        index = next(
            (i for i in range(len(folders) - 1, -1, -1) if folders[i] in module_folders), None
        )
        if index is None:
            stem = file_stem(context.file_path)
            if stem in module_folders:
                return [
                    self._create_finding(
                        summary=(
                            f'"{stem}" should be a folder, not a standalone file; '
                            f'use "{stem}/" with an index file'
                        ),
                        context=context,
                    )
                ]
            return []

        folder = folders[index]
        module_path = Path(context.file_path).parents[len(folders) - 1 - index]
        children = context.file_system.list_children(module_path)

        direct_files = [
            c for c in children if c.is_file and CODE_FILE.search(c.name) and not c.name.startswith("index.")
        ]
        subdirectories = [c for c in children if c.is_dir]

        if not direct_files and not subdirectories:
            return []
        if len(direct_files) <= 1 and not subdirectories:
            return []

        is_mixed = bool(direct_files) and bool(subdirectories)
        justified = self._wrapping_justified(context, module_path, subdirectories)
        in_subfolder = index < len(folders) - 1

        if not direct_files and not justified:
            summary = (
                f'Unnecessary wrapper folders in "{folder}/": each item has only one file, '
                f"use direct files instead (e.g. {folder}/component.tsx)"
            )
        elif is_mixed and justified and not in_subfolder:
            summary = (
                f'Some items in "{folder}/" contain multiple files, so every item '
                f"should be wrapped in a folder"
            )
        elif is_mixed and not justified and in_subfolder:
            summary = (
                f'Unnecessary wrapper folder: each item in "{folder}/" has only one file, '
                f"use direct files instead"
            )
        else:
            return []

        return [self._create_finding(summary=summary, context=context)]

    @staticmethod
    def _wrapping_justified(
        context: RuleContext, module_path: Path, subdirectories: list[DirectoryEntry]
    ) -> bool:
        for directory in subdirectories:
            entries = context.file_system.list_children(module_path / directory.name)
            if sum(1 for e in entries if e.is_file and CODE_FILE.search(e.name)) >= 2:
                return True
        return False
