r"""
commandtools string processing: tokenizing, quoting and templating.

Overview
- tokenize(line)
  • Splits a raw input line into tokens on unquoted whitespace.
  • A double quote at the start of a token opens a quoted span; inside it
    whitespace is literal and escape sequences are resolved (see descape).
    The closing quote ends the token.
  • A '{' at the start of a token opens an array literal that runs to its
    matching '}' (quoted strings inside are honoured). The literal is kept
    verbatim; ArrayType parses it later (see split_array).
  • Any other token runs to the next whitespace; quotes inside it are literal.
  • Tokens are never interpreted as names, values or shortcuts here.

- descape(text)
  • Resolves \t \b \n \r \f \' \" \\ and \uXXXX (exactly four hex digits).

- quote(token)
  • Inverse of tokenizing a single quoted token: tokenize(quote(t)) == [t].

- split_array(literal)
  • Splits "{a, "b c", {d}}" into its top-level element literals.

- substitute(template, *replacements)
  • "{0}"-style index substitution with "{{" / "}}" escapes.

Failures
- FormatError for unterminated strings/arrays, illegal escapes and malformed
  templates. Messages name the 1-based column and are deterministic for the
  same input.
"""
import re

from .faults import FormatError, FaultCode

# escape letter -> replacement (\u is handled separately)
_ESCAPES = {
    "t": "\t",
    "b": "\b",
    "n": "\n",
    "r": "\r",
    "f": "\f",
    "'": "'",
    '"': '"',
    "\\": "\\",
}

_TEMPLATE = re.compile(r"\{\{|}}|\{\s*(?P<index>\d+)\s*}|[{}]")


def _unterminated_string(line, start):
    return FormatError(
        "unterminated string starting at column %d" % (start + 1),
        title="unterminated string",
        code=FaultCode.UNTERMINATED_STRING,
        hint='close the string with a double quote (escape inner quotes as \\")',
        line=line,
        column=start + 1,
    )


def _skip_string(line, index):
    """
    return the index right after the closing quote of the string opened at index.
    """
    start = index
    index += 1
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
        elif char == '"':
            return index + 1
        else:
            index += 1
    raise _unterminated_string(line, start)


def _skip_array(line, index):
    """
    return the index right after the '}' matching the '{' at index.
    """
    start = index
    depth = 0
    while index < len(line):
        char = line[index]
        if char == '"':
            index = _skip_string(line, index)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if not depth:
                return index + 1
        index += 1
    raise FormatError(
        "unterminated array starting at column %d" % (start + 1),
        title="unterminated array",
        code=FaultCode.UNTERMINATED_ARRAY,
        hint="close the array with a matching '}'",
        line=line,
        column=start + 1,
    )


def descape(text, /, *, offset=0):
    """
    resolve escape sequences inside a quoted span.

    parameters
    - text: the content between the quotes (quotes already stripped).
    - offset: column of text[0] in the original line, used for messages only.

    raises
    - FormatError: on an unknown escape letter, a dangling backslash, or a
      \\u not followed by exactly four hex digits.
    """
    if not isinstance(text, str):
        raise TypeError("descape() argument must be a string")

    parts = []
    index = 0
    while (found := text.find("\\", index)) >= 0:
        parts.append(text[index:found])
        letter = text[found + 1:found + 2]
        if letter in _ESCAPES:
            parts.append(_ESCAPES[letter])
            index = found + 2
        elif letter == "u" and re.fullmatch(r"[0-9a-fA-F]{4}", digits := text[found + 2:found + 6]):
            parts.append(chr(int(digits, 16)))
            index = found + 6
        else:
            sequence = text[found:found + (6 if letter == "u" else 2)]
            raise FormatError(
                "illegal escape sequence %r at column %d" % (sequence, offset + found + 1),
                title="illegal escape sequence",
                code=FaultCode.ILLEGAL_ESCAPE,
                hint="valid escapes are \\t \\b \\n \\r \\f \\' \\\" \\\\ and \\uXXXX",
                sequence=sequence,
                column=offset + found + 1,
            )
    parts.append(text[index:])
    return "".join(parts)


def tokenize(line, /):
    """
    split a raw input line into tokens.

    returns
    - list[str]: the tokens in order; empty for an empty or all-whitespace line.

    raises
    - FormatError: unterminated quoted span or array literal, illegal escape.
    """
    if not isinstance(line, str):
        raise TypeError("tokenize() argument must be a string")

    tokens = []
    index = 0
    length = len(line)
    while index < length:
        if line[index].isspace():
            index += 1
            continue

        start = index
        if line[index] == '"':
            index = _skip_string(line, index)
            tokens.append(descape(line[start + 1:index - 1], offset=start + 1))
        elif line[index] == "{":
            index = _skip_array(line, index)
            tokens.append(line[start:index])
        else:
            while index < length and not line[index].isspace():
                index += 1
            tokens.append(line[start:index])

    return tokens


def quote(token, /):
    """
    serialize a token so that tokenizing the result yields exactly that token.

    - backslashes and double quotes are escaped, control characters use their
      short escapes, and the whole token is wrapped in double quotes.
    """
    if not isinstance(token, str):
        raise TypeError("quote() argument must be a string")

    reverse = {value: "\\" + key for key, value in _ESCAPES.items() if key != "'"}
    return '"%s"' % "".join(reverse.get(char, char) for char in token)


def split_array(literal, /):
    """
    split an array literal into its top-level element literals.

    - "{1, 2, 3}"          → ["1", "2", "3"]
    - '{"a b", c}'         → ['"a b"', "c"]   (quoted elements stay quoted)
    - "{{1, 2}, {3}}"      → ["{1, 2}", "{3}"]
    - "{}"                 → []

    raises
    - FormatError: when the literal is not a single braced array.
    """
    if not isinstance(literal, str):
        raise TypeError("split_array() argument must be a string")
    if not (literal := literal.strip()).startswith("{") or _skip_array(literal, 0) != len(literal):
        raise FormatError(
            "malformed array literal %r" % literal,
            title="malformed array",
            code=FaultCode.UNTERMINATED_ARRAY,
            hint="write arrays as {first, second, ...}",
            literal=literal,
        )

    elements = []
    body = literal[1:-1]
    index = 0
    start = 0
    while index < len(body):
        char = body[index]
        if char == '"':
            index = _skip_string(body, index)
            continue
        if char == "{":
            index = _skip_array(body, index)
            continue
        if char == ",":
            elements.append(body[start:index].strip())
            start = index + 1
        index += 1

    if (last := body[start:].strip()) or elements:
        elements.append(last)
    return elements


def substitute(template, /, *replacements):
    """
    replace "{N}" markers with the N-th replacement (str() of it, "None" for None).

    rules
    - "{{" and "}}" produce literal braces.
    - whitespace inside a marker is tolerated: "{ 0 }".
    - any other brace, or an index without a replacement, is a FormatError.

    example
    - substitute("{0}> ", "root") -> "root> "
    """
    if not isinstance(template, str):
        raise TypeError("substitute() first argument must be a string")

    def replace(match):
        if match[0] == "{{":
            return "{"
        if match[0] == "}}":
            return "}"
        if match["index"] is None:
            raise FormatError(
                "stray brace at column %d of template %r" % (match.start() + 1, template),
                title="malformed template",
                code=FaultCode.MALFORMED_TEMPLATE,
                hint="double the brace ({{ or }}) to write it literally",
                template=template,
            )
        if (index := int(match["index"])) >= len(replacements):
            raise FormatError(
                "template %r requires at least %d replacements but %d were given" % (
                    template, index + 1, len(replacements)
                ),
                title="malformed template",
                code=FaultCode.MALFORMED_TEMPLATE,
                hint="pass a replacement for every index used in the template",
                template=template,
            )
        return str(replacements[index])

    return _TEMPLATE.sub(replace, template)


__all__ = (
    "tokenize",
    "descape",
    "quote",
    "split_array",
    "substitute",
)
