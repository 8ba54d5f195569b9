"""Lexical analysis for the Mandrill language. Turns source text into a finite, ordered stream of Tokens terminated by
a single EOF token.

Tokens can be loosely defined as follows:

```
<ident>   ::= (<letter> | "_") (<letter> | "_" | <digit>)*  ; keywords are looked up in a fixed table
<int>     ::= <digit>+
<string>  ::= '"' <char>* '"'                               ; raw content, no escape processing
<symbol>  ::= "==" | "!=" | "=" | "+" | "-" | "*" | "/" | "!" | "<" | ">"
            | "," | ";" | ":" | "(" | ")" | "{" | "}" | "[" | "]"
```

Anything else is scanned as an ILLEGAL token, which the parser always reports as a syntax error.
"""

from dataclasses import dataclass, field
from enum import Enum


class TokenType(Enum):
    # keywords
    LET = "let"
    FUNCTION = "fn"
    IF = "if"
    ELSE = "else"
    RETURN = "return"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"

    # single character symbols
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    ASTERISK = "*"
    SLASH = "/"
    BANG = "!"
    LT = "<"
    GT = ">"

    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"

    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # double character symbols
    EQ = "=="
    NOT_EQ = "!="

    # other
    IDENT = "IDENT"
    INT = "INT"
    STRING = "STRING"

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    @classmethod
    def _build_table(cls, start, end):
        members = list(cls)
        return {member.value: member for member in members[members.index(start):members.index(end) + 1]}

    @classmethod
    def keywords(cls):
        return cls._build_table(TokenType.LET, TokenType.NULL)

    @classmethod
    def single_character_symbols(cls):
        return cls._build_table(TokenType.ASSIGN, TokenType.RBRACKET)

    @classmethod
    def double_character_symbols(cls):
        return cls._build_table(TokenType.EQ, TokenType.NOT_EQ)


KEYWORDS = TokenType.keywords()
SINGLE_CHARACTER_SYMBOLS = TokenType.single_character_symbols()
DOUBLE_CHARACTER_SYMBOLS = TokenType.double_character_symbols()


@dataclass(frozen=True)
class Token:
    """A (kind, literal) pair. lineno/column point at the first character and only serve diagnostics, so they take no
    part in equality.
    """
    type: TokenType
    literal: str
    lineno: int = field(default=1, compare=False)
    column: int = field(default=1, compare=False)

    def __repr__(self):
        return f"Token({self.type.name}, {self.literal!r}, position={self.lineno}:{self.column})"


def is_letter(char):
    return char is not None and (char.isalpha() or char == "_")


def is_digit(char):
    return char is not None and "0" <= char <= "9"


class Lexer:
    """Single-use, single-pass scanner with one character of lookahead."""

    def __init__(self, text):
        self.text = text
        self.position = 0
        self.lineno = 1
        self.column = 1
        self.done = False

    @property
    def current_char(self):
        return self.text[self.position] if self.position < len(self.text) else None

    @property
    def next_char(self):
        return self.text[self.position + 1] if self.position + 1 < len(self.text) else None

    def advance_position(self):
        if self.current_char == "\n":
            self.lineno += 1
            self.column = 0
        self.position += 1
        self.column += 1

    def next_token(self):
        """Returns the next Token. Once EOF has been produced, every further call returns EOF again."""
        while self.current_char is not None and self.current_char.isspace():
            self.advance_position()

        lineno, column = self.lineno, self.column
        char = self.current_char

        if char is None:
            self.done = True
            return Token(TokenType.EOF, "", lineno, column)

        if is_letter(char):
            literal = self._read_while(lambda c: is_letter(c) or is_digit(c))
            return Token(KEYWORDS.get(literal, TokenType.IDENT), literal, lineno, column)

        if is_digit(char):
            return Token(TokenType.INT, self._read_while(is_digit), lineno, column)

        if char == "\"":
            return self._read_string(lineno, column)

        if self.next_char is not None:
            token_type = DOUBLE_CHARACTER_SYMBOLS.get(char + self.next_char)
            if token_type is not None:
                self.advance_position()
                self.advance_position()
                return Token(token_type, token_type.value, lineno, column)

        token_type = SINGLE_CHARACTER_SYMBOLS.get(char, TokenType.ILLEGAL)
        self.advance_position()
        return Token(token_type, char, lineno, column)

    def _read_while(self, predicate):
        start = self.position
        while predicate(self.current_char):
            self.advance_position()
        return self.text[start:self.position]

    def _read_string(self, lineno, column):
        start = self.position
        self.advance_position()  # opening quote
        value = self._read_while(lambda c: c is not None and c != "\"")

        if self.current_char is None:
            # unterminated string literal
            return Token(TokenType.ILLEGAL, self.text[start:], lineno, column)

        self.advance_position()  # closing quote
        return Token(TokenType.STRING, value, lineno, column)

    def __iter__(self):
        while not self.done:
            yield self.next_token()
