"""
Naming rules for identifiers, props, hooks and folder-derived names.

All rules in this module are autofixable through scope-aware renames.

Rules in this module:
- NAMING.VARIABLE_NAMING - Variables and destructured names must be camelCase
- NAMING.PROP_NAMING - Boolean/callback members of prop types need is/has/on names
- NAMING.DESTRUCTURED_PROP_NAMING - Destructured boolean/callback props renamed locally
- NAMING.USE_STATE_NAMING - Boolean useState pairs named isX/setIsX
- NAMING.FOLDER_BASED_NAMING - Exports named from their folder chain
- NAMING.HOOK_FUNCTION_NAMING - Exported hooks match their file name
- NAMING.ENUM_MEMBER_NAMING - Enum members must be UPPER_SNAKE_CASE
"""

# Rules will be auto-discovered from this directory
