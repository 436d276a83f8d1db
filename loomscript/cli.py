"""
loomc - command-line driver for the Loomscript front end.

Reads one source file, lexes it, parses it statement by statement and prints
each top-level AST as a tree. Diagnostics go to stderr.

Examples:
    loomc program.loom              # print the AST
    loomc --tokens program.loom     # print the token stream
    loomc -v program.loom           # with debug logging
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO

import colorama

from .lexer import Lexer, LexerError, Token
from .parser import Parser, ParseError
from .printer import pretty_print

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loomc",
        description="Parse a Loomscript source file and print its syntax tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('file', nargs='?',
                        help='Loomscript source file to parse')
    parser.add_argument('--tokens', action='store_true',
                        help='Print the token stream instead of the syntax tree')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging on stderr')
    parser.add_argument('--no-color', action='store_true',
                        help='Disable colored diagnostics')
    return parser


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


class Reporter:
    """Writes diagnostics to stderr, in red unless color is disabled."""

    def __init__(self, stream: TextIO, color: bool):
        self.stream = stream
        self.color = color
        if color:
            colorama.just_fix_windows_console()

    def error(self, headline: str, details: str = ""):
        if self.color:
            headline = f"{colorama.Fore.RED}{headline}{colorama.Style.RESET_ALL}"
        self.stream.write(headline + "\n")
        if details:
            self.stream.write(details if details.endswith("\n") else details + "\n")


def print_tokens(tokens: List[Token], stream: TextIO):
    for token in tokens:
        stream.write(f"{token.line:>4}  {token.type.name:<14} {token.text!r}\n")


def run(path: str, show_tokens: bool, reporter: Reporter, out: TextIO) -> int:
    """
    Lex and parse ``path``, printing results to ``out``. Returns the exit code.

    The whole file is lexed before parsing starts. A lexical failure therefore
    ends the run before the ``AST:`` header, and no statement of the
    truncated token stream is parsed.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            source = f.read()
    except OSError as e:
        reporter.error(f"Cannot read {path}: {e.strerror or e}")
        return EXIT_FAILURE

    try:
        tokens = Lexer(source, path).tokenize()
    except LexerError as e:
        reporter.error(f"Lexing failed at line {e.line}: {e.kind}", str(e))
        return EXIT_FAILURE

    if show_tokens:
        print_tokens(tokens, out)
        return EXIT_OK

    parser = Parser(tokens)
    out.write("AST:\n")

    while not parser.is_at_end():
        try:
            node = parser.parse_statement()
        except ParseError as e:
            reporter.error(f"Parsing failed at line {e.line}: {e.kind}", str(e))
            return EXIT_FAILURE
        pretty_print(node, out)

    logger.debug("%s parsed successfully", path)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the loomc command."""
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)

    if args.file is None:
        arg_parser.print_usage(sys.stderr)
        return EXIT_FAILURE

    configure_logging(args.verbose)
    reporter = Reporter(sys.stderr, color=not args.no_color and sys.stderr.isatty())

    return run(args.file, args.tokens, reporter, sys.stdout)


if __name__ == "__main__":
    sys.exit(main())
