"""Per-language regex tables for source-file summaries.

Each table lists one pattern per category (functions, imports, types,
structs) plus the comment markers the line scanner must skip. Patterns run
against whitespace-stripped lines; when a pattern has several alternatives,
the first non-empty capture group is the extracted name. The tables are
built once at import time and exposed read-only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class ImportBlock:
    """Grouped import syntax such as Go's ``import ( ... )``."""

    open_pattern: re.Pattern[str]
    close_marker: str
    item_pattern: re.Pattern[str]


@dataclass(frozen=True)
class LanguagePatterns:
    """Regex rules and comment markers for one language family."""

    name: str
    function_pattern: re.Pattern[str] | None
    import_pattern: re.Pattern[str] | None
    type_pattern: re.Pattern[str] | None
    struct_pattern: re.Pattern[str] | None
    line_comment_prefixes: tuple[str, ...] = ("//",)
    block_comments: tuple[tuple[str, str], ...] = (("/*", "*/"),)
    import_block: ImportBlock | None = None


def first_capture(match: re.Match[str] | None) -> str | None:
    """Return the first non-empty capture group of ``match``."""
    if match is None:
        return None
    for group in match.groups():
        if group:
            return group.strip()
    return None


_C_FAMILY_FUNCTION = re.compile(
    r"^(?!(?:return|else|new|delete|throw|case|goto|using|typedef)\b)"
    r"(?:[\w:<>]+\s+)*?[\w:<>]+[\s*&]+((?:\w+::)*~?\w+)\s*\("
)
_C_FAMILY_INCLUDE = re.compile(r"^#\s*include\s+[<\"]([^>\"]+)[>\"]")

GO_PATTERNS = LanguagePatterns(
    name="go",
    function_pattern=re.compile(r"^func\s+(?:\([^)]*\)\s*)?(\w+)"),
    import_pattern=re.compile(r"^import\s+(?:[\w.]+\s+)?[\"`]([^\"`]+)[\"`]"),
    type_pattern=re.compile(r"^type\s+(\w+)\s+"),
    struct_pattern=re.compile(r"^type\s+(\w+)\s+struct\b"),
    import_block=ImportBlock(
        open_pattern=re.compile(r"^import\s*\($"),
        close_marker=")",
        item_pattern=re.compile(r"^(?:[\w.]+\s+)?[\"`]([^\"`]+)[\"`]"),
    ),
)

PYTHON_PATTERNS = LanguagePatterns(
    name="python",
    function_pattern=re.compile(r"^(?:async\s+)?def\s+(\w+)"),
    import_pattern=re.compile(r"^from\s+([\w.]+)\s+import\b|^import\s+(.+)"),
    type_pattern=re.compile(r"^class\s+(\w+)"),
    struct_pattern=re.compile(r"^class\s+(\w+)"),
    line_comment_prefixes=("#",),
    block_comments=(('"""', '"""'), ("'''", "'''")),
)

JAVASCRIPT_PATTERNS = LanguagePatterns(
    name="javascript",
    function_pattern=re.compile(
        r"^(?:export\s+)?(?:default\s+)?(?:async\s+)?function\s*\*?\s*(\w+)"
        r"|^(?:export\s+)?(?:const|let|var)\s+(\w+)\s*=.*=>"
        r"|^(\w+)\s*:\s*(?:async\s+)?function\b"
    ),
    import_pattern=re.compile(
        r"^import\b.*\bfrom\s+['\"]([^'\"]+)['\"]"
        r"|^import\s+['\"]([^'\"]+)['\"]"
        r"|^(?:const|let|var)\s+.*=\s*require\(['\"]([^'\"]+)['\"]\)"
    ),
    type_pattern=re.compile(r"^(?:export\s+)?(?:default\s+)?class\s+(\w+)|^(?:export\s+)?interface\s+(\w+)"),
    struct_pattern=re.compile(r"^(?:export\s+)?(?:default\s+)?class\s+(\w+)|^(?:export\s+)?interface\s+(\w+)"),
)

TYPESCRIPT_PATTERNS = LanguagePatterns(
    name="typescript",
    function_pattern=JAVASCRIPT_PATTERNS.function_pattern,
    import_pattern=re.compile(r"^import\b.*\bfrom\s+['\"]([^'\"]+)['\"]|^import\s+['\"]([^'\"]+)['\"]"),
    type_pattern=re.compile(
        r"^(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+(\w+)"
        r"|^(?:export\s+)?interface\s+(\w+)"
        r"|^(?:export\s+)?type\s+(\w+)"
    ),
    struct_pattern=re.compile(
        r"^(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+(\w+)|^(?:export\s+)?interface\s+(\w+)"
    ),
)

RUST_PATTERNS = LanguagePatterns(
    name="rust",
    function_pattern=re.compile(r"^(?:pub(?:\([^)]*\))?\s+)?(?:const\s+)?(?:async\s+)?(?:unsafe\s+)?fn\s+(\w+)"),
    import_pattern=re.compile(r"^(?:pub\s+)?use\s+([^;]+);"),
    type_pattern=re.compile(
        r"^(?:pub(?:\([^)]*\))?\s+)?(?:struct\s+(\w+)|enum\s+(\w+)|type\s+(\w+)|trait\s+(\w+))"
    ),
    struct_pattern=re.compile(r"^(?:pub(?:\([^)]*\))?\s+)?struct\s+(\w+)"),
)

CPP_PATTERNS = LanguagePatterns(
    name="cpp",
    function_pattern=_C_FAMILY_FUNCTION,
    import_pattern=_C_FAMILY_INCLUDE,
    type_pattern=re.compile(r"^(?:typedef\s+)?(?:class|struct|enum(?:\s+class)?|union)\s+(\w+)"),
    struct_pattern=re.compile(r"^(?:typedef\s+)?(?:class|struct)\s+(\w+)"),
)

JAVA_PATTERNS = LanguagePatterns(
    name="java",
    function_pattern=re.compile(
        r"^(?:(?:public|private|protected|static|final|abstract|synchronized|native|default)\s+)+"
        r"(?:<[^>]+>\s+)?[\w<>\[\],.?]+\s+(\w+)\s*\("
    ),
    import_pattern=re.compile(r"^import\s+(?:static\s+)?([\w.*]+)\s*;"),
    type_pattern=re.compile(
        r"^(?:(?:public|private|protected|abstract|final|static|sealed)\s+)*(?:class|interface|enum|record)\s+(\w+)"
    ),
    struct_pattern=re.compile(r"^(?:(?:public|private|protected|abstract|final|static|sealed)\s+)*class\s+(\w+)"),
)

GENERIC_PATTERNS = LanguagePatterns(
    name="generic",
    function_pattern=re.compile(
        r"^(?:export\s+)?(?:async\s+)?def\s+([A-Za-z_][\w!?]*)"
        r"|^(?:export\s+)?(?:async\s+)?function\s+([A-Za-z_$][\w$]*)"
        r"|^func\s+(?:\([^)]*\)\s*)?(\w+)"
        r"|^(?:pub\s+)?(?:async\s+)?fn\s+(\w+)"
        r"|^(?:(?:public|private|internal|open|suspend|override)\s+)*fun\s+(\w+)"
        r"|^([A-Za-z_][A-Za-z0-9_]*)\s*\(\)\s*\{"
    ),
    import_pattern=re.compile(r"^(?:import|require|require_once|include|use|using|source)\s*\(?\s*['\"<]?([\w./:@\\-]+)"),
    type_pattern=re.compile(
        r"^(?:(?:public|private|internal|open|abstract|final|export|case|data|sealed)\s+)*"
        r"(?:class|struct|enum|trait|interface|protocol|object)\s+([A-Za-z_][\w:]*)"
    ),
    struct_pattern=re.compile(
        r"^(?:(?:public|private|internal|open|abstract|final|export|case|data|sealed)\s+)*"
        r"(?:class|struct)\s+([A-Za-z_][\w:]*)"
    ),
    line_comment_prefixes=("//", "#"),
)

PATTERNS_BY_EXTENSION = MappingProxyType(
    {
        ".go": GO_PATTERNS,
        ".py": PYTHON_PATTERNS,
        ".js": JAVASCRIPT_PATTERNS,
        ".jsx": JAVASCRIPT_PATTERNS,
        ".ts": TYPESCRIPT_PATTERNS,
        ".tsx": TYPESCRIPT_PATTERNS,
        ".rs": RUST_PATTERNS,
        ".cpp": CPP_PATTERNS,
        ".cc": CPP_PATTERNS,
        ".c": CPP_PATTERNS,
        ".h": CPP_PATTERNS,
        ".hpp": CPP_PATTERNS,
        ".java": JAVA_PATTERNS,
    }
)


def patterns_for_extension(extension: str) -> LanguagePatterns:
    """Return the registered table for ``extension``, else the generic one."""
    return PATTERNS_BY_EXTENSION.get(extension.lower(), GENERIC_PATTERNS)


__all__ = [
    "GENERIC_PATTERNS",
    "ImportBlock",
    "LanguagePatterns",
    "PATTERNS_BY_EXTENSION",
    "first_capture",
    "patterns_for_extension",
]
