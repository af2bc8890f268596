"""
codeguard - Pattern definitions.

This module contains PURE DATA: the regular expressions behind the built-in
rules. Edit this file to tune what each rule matches.
No logic here - just definitions.

Organization:
1. ITERATION_CONTEXT_PATTERNS - Lines that open an iteration callback
2. MUTABLE_DECLARATION - let declarations
3. OBJECT_MUTATION - obj[key] = value
4. OR_FALLBACK - || [] / || {} / || "" / || null / || 0
5. VARIABLE_ALIAS - const a = b; / const a = b.c;
6. NESTED_LOOKUP - .find( / .filter( inside iteration callbacks
7. MEMOIZE - memoize( calls
8. EXPORTS - export declarations, for export listings
"""

from __future__ import annotations

import re

# =============================================================================
# 1. ITERATION CONTEXT
# =============================================================================
# A brace opened on a line matching one of these starts an iteration
# callback. for / for...of loops are left out on purpose: they commonly run
# small lookups without O(n*m) risk.

ITERATION_CONTEXT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\.map\s*\("),
    re.compile(r"\.flatMap\s*\("),
    re.compile(r"\.some\s*\("),
    re.compile(r"\.every\s*\("),
    re.compile(r"\.reduce\s*\("),
)


# =============================================================================
# 2. MUTABLE DECLARATIONS
# =============================================================================

MUTABLE_DECLARATION_PATTERNS = (re.compile(r"^\s*let\s+\w+"),)

# Lazy module slots: let moduleName = null;  (optionally with a trailing comment)
ALLOWED_LET_PATTERNS = (re.compile(r"^let\s+\w+\s*=\s*null\s*;?\s*(//.*)?$"),)


# =============================================================================
# 3. OBJECT MUTATION
# =============================================================================
# obj[key] = value, acc["k"] = v. The trailing [^=] keeps == / === out.

OBJECT_MUTATION_PATTERNS = (re.compile(r"\w\s*\[[^\]]+\]\s*=\s*[^=]"),)

# Array destructuring: const [a, b] = arr
DESTRUCTURING_SKIP_PATTERNS = (re.compile(r"^\s*(const|let|var)\s*\["),)


# =============================================================================
# 4. OR FALLBACKS
# =============================================================================

OR_FALLBACK_PATTERNS = (
    re.compile(r"\|\|\s*\[\]"),
    re.compile(r"\|\|\s*\{\}"),
    re.compile(r'\|\|\s*""'),
    re.compile(r"\|\|\s*null\b"),
    re.compile(r"\|\|\s*0\b"),
)

OR_FALLBACK_DETAIL = re.compile(r'\|\|\s*(\[\]|\{\}|""|null\b|0\b)')


# =============================================================================
# 5. VARIABLE ALIASING
# =============================================================================

SIMPLE_ALIAS_PATTERN = re.compile(r"^\s*const\s+(\w+)\s*=\s*([a-z_]\w*)\s*;\s*$", re.IGNORECASE)

PROPERTY_ALIAS_PATTERN = re.compile(
    r"^\s*const\s+(\w+)\s*=\s*([a-z_]\w*(?:\.[a-z_]\w*)+)\s*;\s*$",
    re.IGNORECASE,
)

VARIABLE_ALIAS_PATTERNS = (SIMPLE_ALIAS_PATTERN, PROPERTY_ALIAS_PATTERN)

# Right-hand sides that are values, not aliases
BUILTIN_IDENTIFIERS = frozenset({
    "null",
    "undefined",
    "true",
    "false",
    "NaN",
    "Infinity",
})


# =============================================================================
# 6. NESTED LOOKUPS
# =============================================================================

NESTED_LOOKUP_PATTERNS = (re.compile(r"\.(find|filter)\s*\("),)


# =============================================================================
# 7. MEMOIZE
# =============================================================================

MEMOIZE_PATTERNS = (re.compile(r"\bmemoize\s*\("),)


# =============================================================================
# Function definitions (for function-name allowlists)
# =============================================================================

FUNCTION_DEFINITION_TEMPLATES = (
    r"\bconst\s+{name}\s*=",
    r"\blet\s+{name}\s*=",
    r"\bvar\s+{name}\s*=",
    r"\bfunction\s+{name}\s*\(",
    r":\s*{name}\s*[,}})]",
)


# =============================================================================
# 8. EXPORTS
# =============================================================================

IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")

EXPORT_FUNCTION_PATTERN = re.compile(r"^\s*export\s+(?:async\s+)?function\s+([a-zA-Z_$][a-zA-Z0-9_$]*)")

EXPORT_VAR_PATTERN = re.compile(r"^\s*export\s+(?:const|let|var)\s+([a-zA-Z_$][a-zA-Z0-9_$]*)")

# export { a, b as c } - may continue over several lines
EXPORT_BRACE_START = re.compile(r"^\s*export\s*\{")

EXPORT_DEFAULT_PATTERN = re.compile(r"^\s*export\s+default\s+(?:function\s+)?([a-zA-Z_$][a-zA-Z0-9_$]*)")

# "name as alias" inside an export list
EXPORT_ALIAS_SEPARATOR = re.compile(r"\s+as\s+")
