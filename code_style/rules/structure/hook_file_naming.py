"""
Hook file naming rule.

Hook files inside ``hooks/<module>/`` carry the module name:

    hooks/super-admins/use-create-super-admin.ts
    hooks/super-admins/use-super-admins-list.ts
    hooks/dashboard/super-admins/use-get-dashboard-super-admin.ts

List hooks follow ``use-{chain}-{plural}-list`` and verb hooks
``use-{verb}-{chain}-{singular}``, where the chain is the folders
between ``hooks/`` and the module folder (grouping folders elided).
"""

from ...naming.paths import GROUPING_FOLDERS, file_stem, singularize, split_path
from ..base import BaseRule, Finding, RuleContext, Severity


class HookFileNamingRule(BaseRule):
    """use-{verb}-{chain}-{singular} / use-{chain}-{plural}-list."""

    @property
    def rule_id(self) -> str:
        return "STRUCTURE.HOOK_FILE_NAMING"

    @property
    def name(self) -> str:
        return "Hook File Naming"

    @property
    def category(self) -> str:
        return "structure"

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def description(self) -> str:
        return (
            "Hook files in hooks/ module subfolders must include the module name: "
            "use-{verb}-{chain}-{singular} or use-{chain}-{plural}-list."
        )

    def check(self, context: RuleContext) -> list[Finding]:
        message = self.check_name(context.file_path)
        if message is None:
            return []
        return [self._create_finding(summary=message, context=context)]

    @staticmethod
    def check_name(path) -> str | None:
        """Problem with a hook file's name, or None when it conforms."""
        stem = file_stem(path)
        if stem == "index" or not stem.startswith("use-"):
            return None

        parts = split_path(path)
        folders = parts[:-1]
        if "hooks" not in folders:
            return None
        hooks_index = len(folders) - 1 - folders[::-1].index("hooks")
        after_hooks = folders[hooks_index + 1 :]
        if not after_hooks:
            return None

        module = after_hooks[-1]
        if module in GROUPING_FOLDERS:
            return None
        chain = "-".join(f for f in after_hooks[:-1] if f not in GROUPING_FOLDERS)
        singular = singularize(module)

        if stem.endswith("-list"):
            expected = f"use-{chain}-{module}-list" if chain else f"use-{module}-list"
            if stem != expected:
                return (
                    f'List hook file "{stem}" should be named "{expected}" '
                    f"(use-{{chain}}-{{module-plural}}-list)"
                )
            return None

        suffix = f"-{chain}-{singular}" if chain else f"-{singular}"
        example = f"use-{{verb}}{suffix}"
        if not stem.endswith(suffix):
            return f'Hook file "{stem}" should end with "{suffix}" ({example})'

        verb = stem[len("use-") : len(stem) - len(suffix)]
        if not verb:
            return f'Hook file "{stem}" is missing a verb ({example})'
        return None
