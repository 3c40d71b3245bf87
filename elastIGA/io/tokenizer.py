"""
Line reader and tokenizer for the keyword-based input format.

Keyword input files are line oriented:

    # comment
    ISOTROPIC 2
    1  2.1e11 0.3 7850
    2  7.0e10 0.33 2700
    GRAVITY 0.0 -9.81

A section starts with a keyword line, optionally followed by data lines that
the section parser reads itself from the same stream. Blank lines and
everything following a '#' are ignored.

Data lines are consumed through a LineTokenizer, which hands out typed
tokens in order and raises InputError naming the offending token when one is
missing or malformed.
"""

from typing import Iterator, List, Optional, TextIO, Union


class InputError(ValueError):
    """Raised for a missing or malformed token in keyword input."""
    pass


def strip_comment(line: str) -> str:
    """Remove a trailing '#' comment and surrounding whitespace."""
    return line.split("#", 1)[0].strip()


def read_line(stream: Union[TextIO, Iterator[str]]) -> Optional[str]:
    """
    Read the next non-empty, non-comment line.

    Parameters:
        stream: Text stream or iterator of lines

    Returns:
        Stripped line, or None at end of input
    """
    for line in stream:
        line = strip_comment(line)
        if line:
            return line
    return None


class LineTokenizer:
    """
    Sequential typed access to the whitespace-separated tokens of one line.

    Example:
        tokens = LineTokenizer("1 2 1 -1.5e6 Ramp2")
        patch = tokens.next_int("patch")
        face = tokens.next_int("face")
        pdir = tokens.next_int("direction")
        value = tokens.next_float("pressure")
        func = tokens.next_str()   # "Ramp2", or None when absent
    """

    def __init__(self, line: str):
        self.line = line
        self._tokens: List[str] = line.split()
        self._pos = 0

    @property
    def has_more(self) -> bool:
        """True if unread tokens remain."""
        return self._pos < len(self._tokens)

    def peek(self) -> Optional[str]:
        """Return the next token without consuming it."""
        return self._tokens[self._pos] if self.has_more else None

    def next_str(self, name: Optional[str] = None) -> Optional[str]:
        """
        Consume the next token as a string.

        Parameters:
            name: Token name. If given, the token is mandatory and a missing
                  token raises InputError; otherwise None is returned.
        """
        if not self.has_more:
            if name is not None:
                raise InputError(f"Missing {name} in \"{self.line}\"")
            return None
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def next_int(self, name: str) -> int:
        """Consume the next token as an integer."""
        token = self.next_str(name)
        try:
            return int(token)
        except ValueError:
            raise InputError(f"Invalid {name} \"{token}\" in \"{self.line}\"") from None

    def next_float(self, name: str) -> float:
        """Consume the next token as a floating point number."""
        token = self.next_str(name)
        try:
            return float(token)
        except ValueError:
            raise InputError(f"Invalid {name} \"{token}\" in \"{self.line}\"") from None

    def remaining(self) -> List[str]:
        """Consume and return all unread tokens."""
        tokens = self._tokens[self._pos:]
        self._pos = len(self._tokens)
        return tokens


def keyword_argument(keyword: str, name: str) -> LineTokenizer:
    """
    Tokenizer over the arguments following the leading keyword of a line.

    Example:
        keyword_argument("ISOTROPIC 2", "ISOTROPIC").next_int("count")  # -> 2
    """
    return LineTokenizer(keyword[len(name):])
