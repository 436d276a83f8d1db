"""
Loomscript Lexer - turns source text into tokens

The lexer owns its scan position and hands out one token per call to
next_token(). tokenize() drains it into a list that always ends in exactly
one EOF token. Any lexical failure is fatal and raised immediately.
"""

import logging
from typing import Iterator, List

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, SINGLE_CHAR_TOKENS, TWO_CHAR_OPERATORS
)
from .errors import (
    LexerError, InvalidCharacterError, UnterminatedStringError,
    InvalidNumberError, InvalidEscapeError
)

logger = logging.getLogger(__name__)

ESCAPE_SEQUENCES = {
    '"': '"',
    'n': '\n',
    '\\': '\\',
}


class Lexer:
    """
    Loomscript lexical analyzer.

    Pull-based: each next_token() call skips comments and whitespace and
    scans exactly one token, advancing the lexer's own cursor. The token
    sequence is finite and not restartable; once the end of the buffer is
    reached every further call yields an EOF token.
    """

    def __init__(self, source: str, filename: str = "<unknown>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the EOF token."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def tokenize(self) -> List[Token]:
        """
        Tokenize the rest of the source code.

        Returns:
            List of tokens ending in a single EOF token

        Raises:
            LexerError: On the first lexical failure
        """
        tokens = list(self)
        logger.debug("%s: produced %d tokens", self.filename, len(tokens))
        return tokens

    def next_token(self) -> Token:
        """Scan and return the next token from the source."""
        self._skip_whitespace_and_comments()

        start = self._location()

        if self.pos >= len(self.source):
            return Token(TokenType.EOF, "", start)

        current_char = self.source[self.pos]

        try:
            if current_char in SINGLE_CHAR_TOKENS:
                self._advance()
                token = Token(SINGLE_CHAR_TOKENS[current_char], current_char, start)
            elif current_char in TWO_CHAR_OPERATORS:
                token = self._tokenize_operator(start)
            elif current_char == '"':
                token = self._tokenize_string(start)
            elif self._is_digit(current_char):
                token = self._tokenize_number(start)
            elif self._is_identifier_start(current_char):
                token = self._tokenize_identifier_or_keyword(start)
            else:
                raise InvalidCharacterError(current_char, start)
        except LexerError as e:
            logger.debug("lexical failure at %s: %s", e.location, e.diagnostic.message)
            raise

        logger.debug("token %s at %s", token, token.location)
        return token

    def _tokenize_operator(self, start: SourceLocation) -> Token:
        """Tokenize '=', '<', '>' or their two-character '=' forms."""
        first = self.source[self.pos]
        single_type, double_type = TWO_CHAR_OPERATORS[first]
        self._advance()

        if self._peek(0) == '=':
            self._advance()
            return Token(double_type, first + '=', start)
        return Token(single_type, first, start)

    def _tokenize_string(self, start: SourceLocation) -> Token:
        """Tokenize a string literal, resolving its escape sequences."""
        self._advance()  # Skip opening quote

        value_parts = []

        while self.pos < len(self.source) and self.source[self.pos] != '"':
            if self.source[self.pos] == '\\':
                escape_location = self._location()
                self._advance()  # Skip backslash
                if self.pos >= len(self.source):
                    break
                escape_char = self.source[self.pos]
                if escape_char not in ESCAPE_SEQUENCES:
                    raise InvalidEscapeError('\\' + escape_char, escape_location)
                value_parts.append(ESCAPE_SEQUENCES[escape_char])
                self._advance()
            else:
                value_parts.append(self.source[self.pos])
                self._advance()

        if self.pos >= len(self.source):
            raise UnterminatedStringError(start)

        self._advance()  # Skip closing quote

        return Token(TokenType.STRING, ''.join(value_parts), start)

    def _tokenize_number(self, start: SourceLocation) -> Token:
        """Tokenize a run of digits containing at most one '.'."""
        start_pos = self.pos
        seen_dot = False

        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char == '.':
                if seen_dot:
                    # Report the whole malformed run, e.g. '1.2.3'
                    end = self.pos
                    while end < len(self.source) and (
                            self._is_digit(self.source[end]) or self.source[end] == '.'):
                        end += 1
                    raise InvalidNumberError(self.source[start_pos:end], start)
                seen_dot = True
            elif not self._is_digit(char):
                break
            self._advance()

        return Token(TokenType.NUMBER, self.source[start_pos:self.pos], start)

    def _tokenize_identifier_or_keyword(self, start: SourceLocation) -> Token:
        """Tokenize an identifier or keyword."""
        start_pos = self.pos

        # First character is already validated as identifier start
        self._advance()

        while self.pos < len(self.source) and self._is_identifier_continue(self.source[self.pos]):
            self._advance()

        lexeme = self.source[start_pos:self.pos]
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)

        return Token(token_type, lexeme, start)

    @staticmethod
    def _is_digit(char: str) -> bool:
        return '0' <= char <= '9'

    @staticmethod
    def _is_identifier_start(char: str) -> bool:
        """Check if character can start an identifier (ASCII only)."""
        return char.isascii() and (char.isalpha() or char == '_')

    @staticmethod
    def _is_identifier_continue(char: str) -> bool:
        """Check if character can continue an identifier (ASCII only)."""
        return char.isascii() and (char.isalnum() or char == '_')

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and '#' line comments."""
        while self.pos < len(self.source):
            char = self.source[self.pos]

            if char == '#':
                while self.pos < len(self.source) and self.source[self.pos] != '\n':
                    self._advance()
                continue

            if char.isspace():
                self._advance()
                continue

            break

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _peek(self, offset: int = 1) -> str:
        """Peek at character ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return '\0'

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        List of tokens

    Raises:
        LexerError: If lexing fails
    """
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Args:
        filepath: Path to source file

    Returns:
        List of tokens

    Raises:
        LexerError: If lexing fails
        IOError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, filepath)
