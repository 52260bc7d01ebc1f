"""
Structure rules for folder and file layout.

These rules run once per file and only report; moving files is left
to the developer.

Rules in this module:
- STRUCTURE.FOLDER_STRUCTURE - Flat vs wrapped module folders, loose module files
- STRUCTURE.REDUNDANT_FOLDER_SUFFIX - Names repeating an ancestor folder
- STRUCTURE.HOOK_FILE_NAMING - use-{verb}-{chain}-{singular} hook file names
"""

# Rules will be auto-discovered from this directory
