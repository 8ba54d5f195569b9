import io
import json
import os
import unittest
import urllib.error
from unittest import mock

from mandrill.core.object import NULL, Integer, String
from mandrill.lang.builtins import FALLBACK_QUOTE, fetch_quote, io_builtins


def response(payload):
    urlopen = mock.MagicMock()
    urlopen.return_value.__enter__.return_value.read.return_value = json.dumps(payload).encode("utf-8")
    return urlopen


class PrintTestCase(unittest.TestCase):

    def test_print(self):
        output = io.StringIO()
        builtin_print = io_builtins(output)["print"]

        self.assertIs(NULL, builtin_print(String("a"), Integer(1)))
        self.assertIs(NULL, builtin_print())
        self.assertEqual("a 1\n\n", output.getvalue())


class QuoteTestCase(unittest.TestCase):

    def setUp(self):
        self.quote = io_builtins(io.StringIO())["quote"]

    def test_no_endpoint(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(FALLBACK_QUOTE, self.quote().value)

    def test_quote(self):
        env = {"RANDOM_QUOTE_ENDPOINT": "http://quotes.invalid/random"}
        urlopen = response([{"q": "Simplicity is prerequisite for reliability.", "a": "Dijkstra"}])
        with mock.patch.dict(os.environ, env, clear=True), mock.patch("urllib.request.urlopen", urlopen):
            self.assertEqual("Simplicity is prerequisite for reliability.", self.quote().value)
        self.assertEqual("http://quotes.invalid/random", urlopen.call_args[0][0].full_url)

    def test_system_author_falls_back(self):
        env = {"RANDOM_QUOTE_ENDPOINT": "http://quotes.invalid/random", "SYSTEM_QUOTE_AUTHOR": "zenquotes.io"}
        urlopen = response([{"q": "Too many requests.", "a": "zenquotes.io"}])
        with mock.patch.dict(os.environ, env, clear=True), mock.patch("urllib.request.urlopen", urlopen):
            self.assertEqual(FALLBACK_QUOTE, self.quote().value)

    def test_argument_count(self):
        self.assertEqual("expected 0 arguments, received 1", self.quote(Integer(1)).message)


class FetchQuoteTestCase(unittest.TestCase):

    def test_bad_payloads(self):
        cases = [[], {}, [1], [{"a": "x"}], [{"q": ""}], [{"q": 5}], "text"]
        for case in cases:
            with mock.patch("urllib.request.urlopen", response(case)):
                self.assertIsNone(fetch_quote("http://quotes.invalid"), case)

    def test_network_failure(self):
        urlopen = mock.MagicMock(side_effect=urllib.error.URLError("down"))
        with mock.patch("urllib.request.urlopen", urlopen):
            self.assertIsNone(fetch_quote("http://quotes.invalid"))

    def test_invalid_json(self):
        urlopen = mock.MagicMock()
        urlopen.return_value.__enter__.return_value.read.return_value = b"<html>"
        with mock.patch("urllib.request.urlopen", urlopen):
            self.assertIsNone(fetch_quote("http://quotes.invalid"))


if __name__ == '__main__':
    unittest.main()
