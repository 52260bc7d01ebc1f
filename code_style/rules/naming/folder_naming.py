"""
Folder-based naming rule.

Exported declarations under module folders are named from their
folder chain: ``src/layouts/auth/index.tsx`` exports ``AuthLayout``,
``src/data/user-roles.js`` exports ``userRolesData``. Camel-case
folders (constants, data, reducers, services, strings) only require
the folder suffix, and correct names that nearly match the file name.
"""

from pydantic import Field
from tree_sitter import Node

from ...analysis.source import unwrap_parentheses
from ...naming.cases import is_camel, is_pascal
from ...naming.paths import ModuleInfo, derive_expected_name, module_info
from ..base import BaseRule, Finding, NodeHandler, RuleContext, RuleOptions, Severity
from ._shared import function_value, is_exported, is_module_level, returns_jsx


class FolderNamingOptions(RuleOptions):
    # Additional module folders; their suffix is the singular Pascal name
    extra_folders: list[str] = Field(default_factory=list)


class FolderBasedNamingRule(BaseRule):
    """Exports named after their folder chain."""

    options_model = FolderNamingOptions

    # Allowed length difference for the camel-folder near-match fix
    NEAR_MATCH_DISTANCE = 2

    @property
    def rule_id(self) -> str:
        return "NAMING.FOLDER_BASED_NAMING"

    @property
    def name(self) -> str:
        return "Folder-Based Naming"

    @property
    def category(self) -> str:
        return "naming"

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def description(self) -> str:
        return (
            "Components and exported values under module folders (components, "
            "layouts, views, data ...) must be named from the folder chain with "
            "the folder suffix."
        )

    def can_auto_fix(self) -> bool:
        return True

    def visitors(self) -> dict[str, NodeHandler]:
        return {
            "function_declaration": self._check_function,
            "variable_declarator": self._check_declarator,
        }

    def _check_function(self, node: Node, context: RuleContext) -> list[Finding]:
        name_node = node.child_by_field_name("name")
        if name_node is None or not is_module_level(node):
            return []
        return self._check(name_node, node, node, context)

    def _check_declarator(self, node: Node, context: RuleContext) -> list[Finding]:
        statement = node.parent
        if statement is None or statement.type not in ("lexical_declaration", "variable_declaration"):
            return []
        name_node = node.child_by_field_name("name")
        if name_node is None or name_node.type != "identifier" or not is_module_level(statement):
            return []
        value = unwrap_parentheses(node.child_by_field_name("value"))
        return self._check(name_node, statement, function_value(value), context)

    def _check(
        self,
        name_node: Node,
        statement: Node,
        function: Node | None,
        context: RuleContext,
    ) -> list[Finding]:
        extra_folders = self.options(context).extra_folders
        info = module_info(context.file_path, extra_folders)
        if info is None or info.is_barrel:
            return []
        if not is_exported(statement, context.scope.binding_at(name_node)):
            return []
        expected = derive_expected_name(context.file_path, extra_folders=extra_folders)
        if expected is None:
            return []

        name = context.source.text_of(name_node)
        if info.is_camel_case:
            suggested = self._camel_suggestion(name, expected, info)
        else:
            suggested = self._pascal_suggestion(name, expected, function, info)
        if suggested is None or suggested == name:
            return []

        if info.is_camel_case and not name.endswith(info.suffix):
            summary = f'"{name}" in "{info.folder}" folder must end with "{info.suffix}" ("{suggested}")'
        else:
            summary = f'"{name}" in "{info.folder}" folder must be named "{suggested}"'

        def fix(builder):
            builder.rename_identifier(name_node, suggested)

        return [
            self._create_finding(
                summary=summary,
                context=context,
                node=name_node,
                fix=fix,
                remediation_hints=[
                    "Names chain the file and folder names inside the module folder, "
                    f'innermost first, followed by "{info.suffix}"'
                    if info.suffix
                    else "Names chain the file and folder names inside the module folder"
                ],
            )
        ]

    def _camel_suggestion(self, name: str, expected: str, info: ModuleInfo) -> str | None:
        if not is_camel(name) or not info.suffix:
            return None
        if not name.endswith(info.suffix):
            return name + info.suffix

        # Unrelated names (buttonTypeData in data/app.js) are allowed
        actual_prefix = name[: -len(info.suffix)]
        expected_prefix = expected[: -len(info.suffix)]
        if actual_prefix == expected_prefix:
            return None
        near = (
            expected_prefix.startswith(actual_prefix)
            and len(expected_prefix) - len(actual_prefix) <= self.NEAR_MATCH_DISTANCE
        ) or (
            actual_prefix.startswith(expected_prefix)
            and len(actual_prefix) - len(expected_prefix) <= self.NEAR_MATCH_DISTANCE
        )
        return expected if near else None

    @staticmethod
    def _pascal_suggestion(
        name: str, expected: str, function: Node | None, info: ModuleInfo
    ) -> str | None:
        if not is_pascal(name):
            return None
        if info.requires_jsx and (function is None or not returns_jsx(function)):
            return None
        return expected
