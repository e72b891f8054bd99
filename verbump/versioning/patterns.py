"""Version text patterns database.

Each version-bearing file format is located in two steps:
- a coarse structural pattern (attribute declaration, VERSIONINFO header,
  quoted key line) that finds the text carrying one version slot
- a nested numeric pattern that picks the version token out of that text

Attribute declarations differ per source dialect only in brackets and the
prefix in front of the attribute name, so they are kept in a table keyed by
file extension.
"""

import re
from typing import Dict, TypedDict


class AttributeDialect(TypedDict):
    """Attribute declaration syntax for one source language."""

    name: str
    left: str  # regex for the opening bracket
    right: str  # regex for the closing bracket
    prefix: str  # regex for the text between bracket and attribute name


# ============================================================================
# SHARED FRAGMENTS
# ============================================================================

START_OF_LINE = r'^\s*'
WHITESPACE = r'\s+'
OPTIONAL_WHITESPACE = r'\s*'
QUOTED_STRING = r'"[^"]*"'
PARENTHESES_ENCLOSED = OPTIONAL_WHITESPACE + r'\([^()]*\)' + OPTIONAL_WHITESPACE

GUID = r'\{[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}\}'

QUOTED_STRING_RE = re.compile(QUOTED_STRING)
GUID_RE = re.compile(GUID)

# ============================================================================
# ATTRIBUTE FILES (AssemblyInfo.*)
# ============================================================================

ATTRIBUTE_DIALECTS: Dict[str, AttributeDialect] = {
    ".cs": {"name": "C#", "left": r'\[', "right": r'\]', "prefix": r'\s*assembly\s*:\s*'},
    ".vb": {"name": "Visual Basic", "left": r'<', "right": r'>', "prefix": r'Assembly\s*:\s*'},
    ".cpp": {"name": "C++/CLI", "left": r'\[', "right": r'\]', "prefix": r'\s*assembly\s*:\s?'},
    ".jsl": {"name": "J#", "left": r'/\*\*', "right": r'\*/', "prefix": r'\s*@assembly\s*'},
}

ATTRIBUTE_SUFFIX = 'Attribute'

# the whole quoted argument: digits, dotted components, optional trailing wildcard
ATTRIBUTE_VERSION_RE = re.compile(r'(?<=")[0-9]+(?:\.[0-9]+)*(?:\.\*)?(?=")')


def attribute_line_pattern(dialect: AttributeDialect, attribute_name: str) -> 're.Pattern[str]':
    """Pattern matching one whole attribute declaration starting its line."""
    return re.compile(
        START_OF_LINE
        + dialect['left']
        + dialect['prefix']
        + re.escape(attribute_name)
        + PARENTHESES_ENCLOSED
        + dialect['right'],
        re.MULTILINE,
    )


# ============================================================================
# RESOURCE SCRIPTS (*.rc)
# ============================================================================

RESOURCE_VERSION = r'[0-9]+(?:[,.]\s*[0-9]+){1,3}'
RESOURCE_VERSION_RE = re.compile(RESOURCE_VERSION)
RESOURCE_SEPARATOR_RE = re.compile(r'[,.]\s*')

VERSIONINFO_HEADER_RE = re.compile(START_OF_LINE + r'VS_VERSION_INFO' + WHITESPACE + r'VERSIONINFO', re.MULTILINE)

HEADER_KEYS = {
    'file': 'FILEVERSION',
    'informational': 'PRODUCTVERSION',
}

BLOCK_KEYS = {
    'file': 'FileVersion',
    'informational': 'ProductVersion',
}


def resource_header_pattern(key: str) -> 're.Pattern[str]':
    return re.compile(START_OF_LINE + key + WHITESPACE + RESOURCE_VERSION, re.MULTILINE)


def resource_block_pattern(key: str) -> 're.Pattern[str]':
    # string table values may carry an explicit terminator: "1.0.0.0\0"
    return re.compile(
        START_OF_LINE + r'VALUE' + WHITESPACE + '"' + key + '"' + r'\s*,' + OPTIONAL_WHITESPACE
        + '"' + RESOURCE_VERSION + r'(?:\\0)?"',
        re.MULTILINE,
    )


# ============================================================================
# INSTALLER PROJECTS (*.vdproj, *.isl)
# ============================================================================

SETUP_PROJECT_TYPE_RE = re.compile(
    OPTIONAL_WHITESPACE + r'"ProjectType"' + OPTIONAL_WHITESPACE + '=' + OPTIONAL_WHITESPACE + '"8:' + GUID + '"'
)

# project types without package/product codes
CAB_PROJECT_TYPES = {
    '{3EA9E505-35AC-4774-B492-AD1749C4943A}': 'CAB project',
    '{06A35CCD-C46D-44D5-987B-CF40FF872267}': 'Merge Module project',
}

SETUP_MSI_VERSION = r'[0-9]+\.[0-9]+\.[0-9]+'
SETUP_CAB_VERSION = r'[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+'


def setup_key_line_pattern(key: str, value_pattern: str) -> 're.Pattern[str]':
    """``"Key" = "8:<value>"`` line of a setup project."""
    return re.compile(
        OPTIONAL_WHITESPACE + '"' + key + '"' + OPTIONAL_WHITESPACE + '=' + OPTIONAL_WHITESPACE
        + '"8:' + value_pattern + '"'
    )


ISL_VERSION = r'[0-9]+(?:\.[0-9]+){1,3}'
ISL_VERSION_RE = re.compile(ISL_VERSION)


def isl_row_pattern(key: str, value_pattern: str) -> 're.Pattern[str]':
    """``<row><td>Key</td><td>value</td><td/></row>`` property table row."""
    return re.compile(
        OPTIONAL_WHITESPACE + r'<row><td>' + key + r'</td><td>' + value_pattern + r'</td><td/></row>'
    )
