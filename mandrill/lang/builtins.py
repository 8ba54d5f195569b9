"""Builtins that talk to the outside world. They follow the same calling convention as the core builtins (Objects in,
Object out) and are registered by the session on top of them.

`quote` reads its configuration from the environment at call time:

- RANDOM_QUOTE_ENDPOINT: URL answering with JSON shaped like [{"q": "<quote>", "a": "<author>"}]
- SYSTEM_QUOTE_AUTHOR: author name the endpoint uses for its own notices (e.g. rate limiting), never shown as a quote
"""

import json
import os
import sys
import urllib.request

from mandrill.core.builtins import argument_count_error
from mandrill.core.object import NULL, String

FALLBACK_QUOTE = "If a program is too slow, it must have a loop."
FETCH_TIMEOUT = 10


def fetch_quote(url, system_author=None):
    """Returns the first quote served by url, or None if there is none worth showing."""
    request = urllib.request.Request(url, headers={"Accept": "application/json"})
    try:
        with urllib.request.urlopen(request, timeout=FETCH_TIMEOUT) as response:
            quotes = json.loads(response.read().decode("utf-8"))
    except (OSError, ValueError):
        return None

    if not isinstance(quotes, list) or not quotes or not isinstance(quotes[0], dict):
        return None

    text, author = quotes[0].get("q"), quotes[0].get("a")
    if not text or not isinstance(text, str) or (system_author and author == system_author):
        return None
    return text


def io_builtins(output=None):
    """Returns the {name: callable} mapping of I/O builtins writing to output (sys.stdout at call time if None)."""

    def builtin_print(*args):
        stream = output if output is not None else sys.stdout
        print(" ".join(arg.inspect() for arg in args), file=stream)
        return NULL

    def builtin_quote(*args):
        if args:
            return argument_count_error(0, len(args))

        url = os.environ.get("RANDOM_QUOTE_ENDPOINT")
        text = fetch_quote(url, os.environ.get("SYSTEM_QUOTE_AUTHOR")) if url else None
        return String(text or FALLBACK_QUOTE)

    return {"print": builtin_print, "quote": builtin_quote}
