"""Session control for the Mandrill language. Drives the lexer/parser/evaluator pipeline, either line by line in
command-line mode or over a whole source file, and owns the root Environment so that bindings accumulate across
lines.
"""

from mandrill.core import ast
from mandrill.core.builtins import builtin_table
from mandrill.core.environment import Environment
from mandrill.core.evaluator import Evaluator
from mandrill.core.lexer import Lexer, TokenType
from mandrill.core.object import is_error
from mandrill.core.parser import Parser
from mandrill.lang.builtins import io_builtins
from mandrill.lang.error import GenericException, escape

OPENING = (TokenType.LPAREN, TokenType.LBRACE, TokenType.LBRACKET)
CLOSING = (TokenType.RPAREN, TokenType.RBRACE, TokenType.RBRACKET)


class Session:
    """Governs a Mandrill session: one root Environment, one evaluator, and the programs queued for execution."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, trace=False, output=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.trace = trace        # whether or not to trace the parser

        self.env = Environment()
        self.builtins = builtin_table(io_builtins(output))
        self.evaluator = Evaluator(self.builtins)

        self.to_exec = {}  # dict of line num: (source, Program) to execute
        self.results = []  # printable results of executed programs, oldest first

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            if source.strip():
                self.add(source, 1)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, add_to_prev=False):
        """Preprocesses a line from the command-line. Returns the line and whether it still has unclosed brackets, in
        which case the caller should keep reading and pass the accumulated text back in.
        """
        if add_to_prev:
            line = add_to_prev + "\n" + line

        depth = 0
        for token in Lexer(line):
            if token.type in OPENING:
                depth += 1
            elif token.type in CLOSING:
                depth -= 1

        return line.rstrip(), depth > 0

    def add(self, source, line_num):
        """Parses source and queues it for execution. Parse errors are raised, nothing is queued in that case."""
        self.error_handler.register_line(self.path, self._line(source, 1), line_num)  # in case error is raised

        parser = Parser(Lexer(source), trace=self.trace)
        program = parser.parse_program()

        if parser.errors:
            token = parser.error_tokens[0]
            line = self.error_handler.register_token(self.path, source, line_num, token)

            msg = "could not parse input:\n    " + "\n    ".join(escape(error) for error in parser.errors)
            raise GenericException(msg, line, token=token)

        self._check_shadowing(source, program, line_num)
        self.to_exec[line_num] = (source, program)

        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Runs the queued programs in order against the session's Environment. A program that evaluates to an Error
        is reported by raising a GenericException; programs queued after it are kept for the next run.
        """
        for line_num, (source, program) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, self._line(source, 1), line_num)
            del self.to_exec[line_num]

            result = self.evaluator.evaluate(program, self.env)

            if is_error(result):
                raise GenericException(escape(result.message), diagnosis=False)
            if result is not None:
                self.results.append(result)

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the printable form of the oldest result."""
        return self.results.pop(0).inspect()

    def _check_shadowing(self, source, program, line_num):
        """Warns about top-level let statements that hide a builtin function."""
        for statement in program.statements:
            if isinstance(statement, ast.LetStatement) and statement.name.name in self.builtins:
                token = statement.name.token
                line = self.error_handler.register_token(self.path, source, line_num, token)
                msg = f"'{escape(token.literal)}' shadows a builtin function"
                self.error_handler.warn(self.path, msg, line, token=token)

    @staticmethod
    def _line(source, lineno):
        lines = source.splitlines()
        return lines[lineno - 1] if 0 < lineno <= len(lines) else ""
