"""Shared constants for applocalize.

Centralizes values used by both the localization layer and the default
message formatter so neither needs to import the other.

Constants are grouped by domain:
- Lookup: language splitting and missing-key handling
- Fetching: transport defaults
- Formatting: locale defaults

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Lookup
    "LANGUAGE_SEPARATOR",
    "MISSING_KEY_SENTINEL",
    # Fetching
    "DEFAULT_FETCH_TIMEOUT",
    # Formatting
    "DEFAULT_LOCALE",
]

# ============================================================================
# LOOKUP
# ============================================================================

# Region-qualified codes fall back to the part before the first separator:
# "en-US" -> "en". Underscores are NOT split ("en_US" stays whole), matching
# the way resource bundles are keyed.
LANGUAGE_SEPARATOR: str = "-"

# Cache-key prefix used instead of the message key when the key itself is
# echoed as the pattern (use_key_if_missing). All key echoes with the same
# literal text share one compiled formatter.
MISSING_KEY_SENTINEL: str = "#"

# ============================================================================
# FETCHING
# ============================================================================

# Seconds before an HTTP resource request is abandoned as a transport failure.
DEFAULT_FETCH_TIMEOUT: float = 10.0

# ============================================================================
# FORMATTING
# ============================================================================

# Locale used when Babel does not recognize the requested one.
DEFAULT_LOCALE: str = "en"
