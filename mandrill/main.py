"""Runs Mandrill source files or starts the interactive shell, under the error handling context manager. Called from the
`mandrill` console script.
"""

import argparse

from mandrill.lang.error import ErrorHandler
from mandrill.lang.session import Session
from mandrill.lang.shell import Shell


def main(argv=None):
    """Runs the Mandrill interpreter."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="mandrill")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--trace", help="print every parse rule as it is entered and left", action="store_true")
        args = parser.parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, trace=args.trace)
            sess.run()

            while sess.results:
                print(sess.pop())

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, trace=args.trace)).cmdloop()


if __name__ == "__main__":
    main()
