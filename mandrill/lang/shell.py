"""Handles interactive/command-line mode for the Mandrill interpreter. Uses cmd as backend."""

import cmd
import getpass


def greeting():
    try:
        user = getpass.getuser()
    except (KeyError, OSError):  # no login name available
        user = "there"
    return f"Hi, {user}! This is the Mandrill programming language.\nFeel free to type in commands..."


class Shell(cmd.Cmd):
    """Mandrill interpreter shell."""
    prompt = ">> "
    secondary_prompt = ".. "  # used for line continuations
    _tmp_prompt = ">> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.intro = greeting()

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Evaluates an arbitrary line of Mandrill."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                start = self.line_num - line.count("\n")
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                self.sess.add(line, start)
                self.sess.run()

                while self.sess.results:
                    print(self.sess.pop())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the Mandrill interpreter!\n\n"
              "Mandrill has integers, booleans, strings, arrays, maps and first-class functions. \n"
              "Bindings made with 'let' are kept for the rest of the session.\n\n"
              "Try it out by typing 'let add = fn(x, y) { x + y };', then 'add(1, 2)'. \n"
              "Builtins: len, first, last, skip, append, print, quote. Type 'exit' to leave.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        if self._tmp_line:
            return self.default("")
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
