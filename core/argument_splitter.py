"""Shell-style splitting of a command line into argument words.

Whitespace separates words and double quotes group text, including
whitespace, into one word. Quotes are removed from the result and may sit
in the middle of a word (``ab"c d"e`` is the single word ``abc de``). An
unterminated quote runs to the end of the line instead of raising. There is
no other escaping.
"""
from typing import List, NamedTuple, Tuple

QUOTE = '"'


class CommandLine(NamedTuple):
    """A split command line: the command word, its arguments and the raw text after the command word"""
    command: str
    args: List[str]
    raw_args: str


def _tokenize(text: str) -> List[Tuple[str, int, int]]:
    """Return (word, start, end) triples, where start/end index into ``text``"""
    tokens = []
    i = 0
    length = len(text)
    while i < length:
        while i < length and text[i].isspace():
            i += 1
        if i >= length:
            break

        start = i
        word = []
        in_quotes = False
        while i < length:
            char = text[i]
            if char == QUOTE:
                in_quotes = not in_quotes
            elif char.isspace() and not in_quotes:
                break
            else:
                word.append(char)
            i += 1
        tokens.append((''.join(word), start, i))
    return tokens


def split_args(text: str) -> List[str]:
    """Split ``text`` into words. Empty input yields a single empty word."""
    words = [word for word, _, _ in _tokenize(text)]
    if not words:
        return [""]
    return words


def split_command_line(text: str) -> CommandLine:
    """Split ``text`` and separate the command word from its arguments.

    ``raw_args`` is the original text following the command word with its
    quoting intact, for commands that want the unsplit argument string.
    """
    tokens = _tokenize(text)
    if not tokens:
        return CommandLine("", [], "")

    command = tokens[0][0]
    args = [word for word, _, _ in tokens[1:]]
    raw_args = text[tokens[1][1]:].rstrip() if len(tokens) > 1 else ""
    return CommandLine(command, args, raw_args)
