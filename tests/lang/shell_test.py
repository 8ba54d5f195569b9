import contextlib
import io
import re
import unittest
from unittest import mock

from mandrill.lang.error import ErrorHandler
from mandrill.lang.session import Session
from mandrill.lang.shell import Shell, greeting

ANSI = re.compile(r"\x1b\[[0-9;]*m")


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.shell = Shell(Session(ErrorHandler(), Session.SH_FILE, cmd_line=True))

    def feed(self, *lines):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            for line in lines:
                self.shell.onecmd(line)
        return ANSI.sub("", out.getvalue())

    def test_results(self):
        self.assertEqual("3\n", self.feed("let a = 1;", "a + 2"))
        self.assertEqual("hi\n", self.feed("\"hi\""))

    def test_continuation(self):
        output = self.feed("let add = fn(x, y) {", "x + y", "};")
        self.assertEqual("", output)
        self.assertEqual(">> ", self.shell.prompt)
        self.assertEqual("7\n", self.feed("add(3, 4)"))

    def test_prompt_switch(self):
        self.feed("if (true) {")
        self.assertEqual(".. ", self.shell.prompt)
        self.assertEqual("1\n", self.feed("1", "}"))
        self.assertEqual(">> ", self.shell.prompt)

    def test_errors_do_not_end_session(self):
        output = self.feed("let x = ;", "foo", "5 * 5")
        self.assertIn("error: could not parse input:", output)
        self.assertIn("error: identifier not found: foo", output)
        self.assertTrue(output.endswith("25\n"))

    def test_exit(self):
        self.assertTrue(self.shell.onecmd("exit"))
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertTrue(self.shell.onecmd("EOF"))

    def test_greeting(self):
        with mock.patch("getpass.getuser", return_value="ada"):
            self.assertTrue(greeting().startswith("Hi, ada!"))
        with mock.patch("getpass.getuser", side_effect=OSError()):
            self.assertTrue(greeting().startswith("Hi, there!"))


if __name__ == '__main__':
    unittest.main()
