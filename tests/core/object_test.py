import unittest

from mandrill.core import ast
from mandrill.core.environment import Environment
from mandrill.core.lexer import Token, TokenType
from mandrill.core.object import (FALSE, NULL, TRUE, Array, Boolean, Builtin, Error, Function, HashKey, Hashable,
                                  Integer, Map, MapPair, ObjectType, ReturnValue, String, fnv1a_64, is_error,
                                  native_bool, to_int64)


class HashKeyTestCase(unittest.TestCase):

    def test_string_hash_key(self):
        hello1, hello2 = String("Hello World"), String("Hello World")
        diff1, diff2 = String("My name is johnny"), String("My name is johnny")

        self.assertIsNot(hello1, hello2)
        self.assertEqual(hello1.hash_key(), hello2.hash_key())
        self.assertEqual(diff1.hash_key(), diff2.hash_key())
        self.assertNotEqual(hello1.hash_key(), diff1.hash_key())

    def test_fnv1a(self):
        self.assertEqual(0xcbf29ce484222325, fnv1a_64(b""))
        self.assertEqual(0xaf63dc4c8601ec8c, fnv1a_64(b"a"))
        self.assertEqual(HashKey(ObjectType.STRING, fnv1a_64("ü".encode("utf-8"))), String("ü").hash_key())

    def test_integer_and_boolean_hash_keys(self):
        self.assertEqual(HashKey(ObjectType.INTEGER, 5), Integer(5).hash_key())
        self.assertEqual(HashKey(ObjectType.INTEGER, 2 ** 64 - 1), Integer(-1).hash_key())
        self.assertEqual(HashKey(ObjectType.BOOLEAN, 1), TRUE.hash_key())
        self.assertEqual(HashKey(ObjectType.BOOLEAN, 0), Boolean(False).hash_key())

        # same bit pattern, different type tag
        self.assertNotEqual(Integer(1).hash_key(), TRUE.hash_key())

    def test_hashable(self):
        for obj in [Integer(1), TRUE, String("a")]:
            self.assertIsInstance(obj, Hashable, obj)
        for obj in [NULL, Array(), Map(), Error("x"), Builtin("f", print)]:
            self.assertNotIsInstance(obj, Hashable, obj)


class IntegerTestCase(unittest.TestCase):

    def test_to_int64(self):
        cases = {0: 0, 5: 5, -5: -5, 2 ** 63 - 1: 2 ** 63 - 1, 2 ** 63: -2 ** 63, -2 ** 63 - 1: 2 ** 63 - 1,
                 2 ** 64 + 3: 3}
        for case, expected in cases.items():
            self.assertEqual(expected, to_int64(case), case)

    def test_integer_wraps(self):
        self.assertEqual(-2 ** 63, Integer(2 ** 63).value)


class InspectTestCase(unittest.TestCase):

    def test_inspect(self):
        body = ast.BlockStatement(Token(TokenType.LBRACE, "{"), [
            ast.ExpressionStatement(Token(TokenType.IDENT, "x"), ast.Identifier(Token(TokenType.IDENT, "x"), "x"))
        ])
        params = [ast.Identifier(Token(TokenType.IDENT, "x"), "x"), ast.Identifier(Token(TokenType.IDENT, "y"), "y")]

        pairs = {String("a").hash_key(): MapPair(String("a"), Integer(1)),
                 Integer(2).hash_key(): MapPair(Integer(2), TRUE)}

        cases = {
            Integer(-3): "-3",
            TRUE: "true",
            FALSE: "false",
            String("hi there"): "hi there",
            NULL: "null",
            Array([Integer(1), String("a"), Array()]): "[1, a, []]",
            Map(pairs): "{a: 1, 2: true}",
            Map(): "{}",
            Function(params, body, Environment()): "fn(x, y) { x }",
            Builtin("len", len): "builtin function len",
            ReturnValue(Integer(1)): "1",
            Error("boom"): "ERROR: boom",
        }
        for obj, expected in cases.items():
            self.assertEqual(expected, obj.inspect(), repr(obj))

    def test_types(self):
        cases = {
            Integer(1): ObjectType.INTEGER, TRUE: ObjectType.BOOLEAN, String(""): ObjectType.STRING,
            NULL: ObjectType.NULL, Array(): ObjectType.ARRAY, Map(): ObjectType.MAP,
            ReturnValue(NULL): ObjectType.RETURN_VALUE, Error(""): ObjectType.ERROR,
            Builtin("f", len): ObjectType.BUILTIN,
        }
        for obj, expected in cases.items():
            self.assertEqual(expected, obj.type(), repr(obj))
        self.assertEqual("INTEGER", str(ObjectType.INTEGER))


class SingletonTestCase(unittest.TestCase):

    def test_native_bool(self):
        self.assertIs(TRUE, native_bool(True))
        self.assertIs(FALSE, native_bool(False))
        self.assertIs(FALSE, native_bool(0))

    def test_is_error(self):
        self.assertTrue(is_error(Error("x")))
        self.assertFalse(is_error(NULL))
        self.assertFalse(is_error(None))


if __name__ == '__main__':
    unittest.main()
