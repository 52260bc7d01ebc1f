"""
Rule discovery system for auto-loading rules from category directories.

New checks are added by dropping a module with a BaseRule subclass
into one of the category packages.
"""

import importlib
import inspect
import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import BaseRule

logger = logging.getLogger(__name__)


class RuleDiscovery:
    """Auto-discovers rules from the rules directory structure.

    Directory structure:
        code_style/rules/
        ├── naming/
        │   ├── variable_naming.py
        │   └── use_state_naming.py
        ├── structure/
        │   └── folder_structure.py
        └── formatting/
            └── comment_format.py
    """

    RULE_CATEGORIES = [
        "naming",
        "structure",
        "formatting",
    ]

    PACKAGE = __package__

    def __init__(self, rules_base_path: Path | None = None):
        """Initialize the rule discovery system.

        Args:
            rules_base_path: Base path for rules directory.
                           Defaults to the directory containing this file.
        """
        self.rules_base_path = rules_base_path or Path(__file__).parent
        self._discovered_rules: dict[str, type[BaseRule]] = {}
        self._discovery_errors: list[str] = []

    def discover_all(self) -> dict[str, type["BaseRule"]]:
        """Discover all rules from all category directories.

        Returns:
            Dictionary mapping rule_id to rule class
        """
        self._discovered_rules.clear()
        self._discovery_errors.clear()

        for category in self.RULE_CATEGORIES:
            self._discovered_rules.update(self.discover_category(category))

        if self._discovery_errors:
            logger.warning(
                f"Rule discovery completed with {len(self._discovery_errors)} errors"
            )

        return dict(self._discovered_rules)

    def discover_category(self, category: str) -> dict[str, type["BaseRule"]]:
        """Discover rules from a specific category.

        Args:
            category: Category name (e.g., 'naming', 'structure')

        Returns:
            Dictionary mapping rule_id to rule class for this category
        """
        category_rules: dict[str, type[BaseRule]] = {}
        category_path = self.rules_base_path / category

        if not category_path.is_dir():
            logger.debug(f"Category directory not found: {category_path}")
            return category_rules

        for module_file in sorted(category_path.glob("*.py")):
            if module_file.name.startswith("_"):
                continue
            try:
                category_rules.update(self._load_rules_from_module(category, module_file))
            except Exception as e:
                error_msg = f"Error loading rules from {module_file}: {e}"
                logger.warning(error_msg)
                self._discovery_errors.append(error_msg)

        return category_rules

    def _load_rules_from_module(
        self, category: str, module_file: Path
    ) -> dict[str, type["BaseRule"]]:
        """Load rule classes defined in a category module."""
        from .base import BaseRule

        rules: dict[str, type[BaseRule]] = {}
        module_name = f"{self.PACKAGE}.{category}.{module_file.stem}"
        module = importlib.import_module(module_name)

        for name, obj in inspect.getmembers(module, inspect.isclass):
            if not issubclass(obj, BaseRule) or obj is BaseRule:
                continue

            # Must be defined in this module (not imported)
            if obj.__module__ != module_name:
                continue

            if inspect.isabstract(obj):
                continue

            try:
                rule_id = obj().rule_id
                rules[rule_id] = obj
                logger.debug(f"Discovered rule: {rule_id} from {module_file}")
            except Exception as e:
                logger.warning(f"Could not instantiate rule {name} from {module_file}: {e}")

        return rules

    @property
    def discovery_errors(self) -> list[str]:
        return self._discovery_errors.copy()

    @property
    def discovered_rule_ids(self) -> list[str]:
        return list(self._discovered_rules.keys())

    def get_rule_class(self, rule_id: str) -> type["BaseRule"] | None:
        return self._discovered_rules.get(rule_id)


def discover_rules(categories: list[str] | None = None) -> dict[str, type["BaseRule"]]:
    """Convenience function to discover rules.

    Args:
        categories: Optional list of categories to discover

    Returns:
        Dictionary mapping rule_id to rule class
    """
    discovery = RuleDiscovery()

    if categories:
        rules: dict[str, type[BaseRule]] = {}
        for category in categories:
            rules.update(discovery.discover_category(category))
        return rules

    return discovery.discover_all()
