"""
Formatting rules for comments and utility-class strings.

Rules in this module:
- FORMATTING.COMMENT_FORMAT - Comment spacing and single-line comment style
- FORMATTING.CLASS_NAME_ORDER - Utility classes in className sorted
- FORMATTING.CLASS_NAME_SPACES - Extra whitespace in className collapsed
"""

# Rules will be auto-discovered from this directory
