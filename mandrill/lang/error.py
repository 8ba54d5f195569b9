"""Error reporting for the Mandrill front end. Only GenericExceptions should be encountered while running: if another
type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Errors inside the language itself (type mismatches, unknown identifiers, ...) are Error objects returned by the
evaluator. They only become GenericExceptions once the session decides to report them. Syntax errors and warnings
carry the Token they are about, which places the caret under the offending source text.
"""

import sys

from termcolor import colored


def escape(text):
    """Escapes text so that it can be embedded in a GenericException message template."""
    return text.replace("{", "{{").replace("}", "}}")


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a Mandrill error/warning. exprs[0] is the
    source line being reported; token, if given, is the token on that line the diagnosis points at.
    """

    def __init__(self, msg, exprs=None, token=None, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]
        self.token = token

        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(msg.format(*exprs))

    @property
    def column(self):
        """1-based column of the offending token, 0 if unknown."""
        return self.token.column if self.token is not None else 0

    @property
    def span(self):
        """(start, end) offsets of the offending text within self.expr. A token is underlined whole (at least one
        character, so EOF and empty tokens still get a caret); without a token the whole line is.
        """
        if self.token is None:
            return 0, max(len(self.expr), 1)
        start = self.token.column - 1
        return start, start + max(len(self.token.literal), 1)

    def diagnose(self, color):
        """Returns self.expr with the offending part highlighted and bolded, and a caret line underneath."""
        start, end = self.span

        diagnosis = "  " + self.expr[:start]
        diagnosis += colored(self.expr[start:end], color, attrs=["bold"])
        diagnosis += self.expr[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def shows_diagnosis(self):
        return not self.internal and bool(self.expr) and self.diagnosis


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report Mandrill errors/warnings instead."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called before the line is parsed or run."""
        self.traceback[path] = (line, line_num)

    def register_token(self, path, source, first_line_num, token):
        """Registers the line of source holding token, source starting at first_line_num. Returns that line."""
        lines = source.splitlines()
        line = lines[token.lineno - 1] if 0 < token.lineno <= len(lines) else ""
        self.register_line(path, line, first_line_num + token.lineno - 1)
        return line

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after the line was handled successfully."""
        self.traceback[path] = (None, None)

    def warn(self, path, *args, **kwargs):
        """Generates and prints a warning about the line registered for path. Never interrupts execution."""
        error = GenericException(*args, **kwargs)
        _, line_num = self.traceback.get(path, (None, None))

        error_msg = colored(f"{path}:{line_num}:{error.column}: ", attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg

        print(error_msg)

        if error.shows_diagnosis():
            print(error.diagnose(ErrorHandler.WARNING))

    def throw(self, error):
        """Reports error (a GenericException) along with the lines registered in self.traceback. Exits the process if
        this handler is fatal.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if error.shows_diagnosis():
            print(error.diagnose(ErrorHandler.ERROR))

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded during evaluation"))
        elif exc_type is GenericException:
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(escape(f"unknown error: '{exc_type.__name__}: {exc_val}'"), internal=True))
            do_exit = True

        return not do_exit
