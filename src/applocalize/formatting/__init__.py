"""Message formatting: adapter protocols and the default ICU implementation.

Submodules:
    protocols - MessageFormatter and CompiledMessage protocols
    syntax    - ICU MessageFormat element tree and parser
    icu       - IcuMessageFormatter (Babel-backed)

Python 3.13+. Uses Babel for i18n.
"""

from .icu import IcuMessage, IcuMessageFormatter
from .protocols import CompiledMessage, MessageFormatter
from .syntax import parse_message

__all__ = [
    "CompiledMessage",
    "IcuMessage",
    "IcuMessageFormatter",
    "MessageFormatter",
    "parse_message",
]
