"""Style-conformance analyzer and auto-fixer for component-based UI code.

Checks JSX/TSX sources for naming, hook, folder and utility-class
conventions and applies scope-aware fixes until the file converges.
"""

__version__ = "1.0.0"

from .driver import Driver, FileResult, run_files
from .rules.base import BaseRule, Finding, RuleContext, Severity
from .rules.engine import RuleEngine, create_rule_engine
from .rules.fix import Fix, TextEdit

__all__ = [
    "BaseRule",
    "Driver",
    "FileResult",
    "Finding",
    "Fix",
    "RuleContext",
    "RuleEngine",
    "Severity",
    "TextEdit",
    "__version__",
    "create_rule_engine",
    "run_files",
]
