"""Exception classes for dictionary compilation and ingredient parsing."""

from typing import Optional


class RecipeUtilsError(Exception):
    """Base exception for recipe-utils."""

    pass


class DictionaryCompileError(RecipeUtilsError):
    """Raised when a dictionary document is malformed, ambiguous or duplicated.

    Compilation stops at the first fault; nothing is resolved silently.
    """

    def __init__(self, group: str, reason: str, expression: Optional[str] = None):
        self.group = group
        self.reason = reason
        self.expression = expression
        if expression is None:
            message = f"Invalid dictionary group '{group}': {reason}"
        else:
            message = f"Invalid dictionary entry '{expression}' in '{group}': {reason}"
        super().__init__(message)


class GrammarParseError(RecipeUtilsError):
    """Raised when an ingredient line matches no grammar alternative.

    Attributes:
        text: The line that failed to parse.
        position: UTF-8 byte offset where parsing stopped.
    """

    def __init__(self, text: str, position: int):
        self.text = text
        self.position = position
        super().__init__(f"Could not parse ingredient line {text!r} at byte {position}")


class InternalConsistencyError(RecipeUtilsError):
    """Raised when the grammar and the compiled lookup tables disagree.

    This is a bug in the dictionary compiler or the grammar, never a problem
    with the input line.
    """

    pass
