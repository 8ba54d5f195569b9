"""Tree-walking evaluator for the Mandrill language.

Evaluation mirrors the AST: every node kind has one rule, each rule returns an Object (or None for statements that
produce no value, such as let). Control flow is carried by values instead of Python exceptions:

- a return statement produces a ReturnValue, which stops the enclosing blocks and is unwrapped at the call boundary
  (or at the top of the program);
- a failing operation produces an Error, which every rule hands back untouched as soon as it sees it, so nothing
  after the failure in the same program is evaluated.

Truthiness: null and false are falsy, strings are falsy only when empty, everything else (every integer, 0 included)
is truthy.
"""

from mandrill.core import ast
from mandrill.core.environment import Environment
from mandrill.core.object import (FALSE, NULL, TRUE, Array, Builtin, Error, Function, Hashable, Integer, Map,
                                  MapPair, ObjectType, ReturnValue, String, is_error, native_bool)


def is_truthy(obj):
    if obj is NULL or obj is FALSE:
        return False
    if obj is TRUE:
        return True
    if isinstance(obj, String):
        return obj.value != ""
    return True


def unwrap_return_value(obj):
    if isinstance(obj, ReturnValue):
        return obj.value
    return NULL if obj is None else obj


def truncated_division(left, right):
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


class Evaluator:
    """Evaluates AST nodes against an Environment. builtins is the read-only name -> Builtin table consulted once the
    environment chain has no binding for a name, so user bindings shadow builtins.
    """

    def __init__(self, builtins=None):
        self.builtins = builtins if builtins is not None else {}

    def evaluate(self, program, env):
        """Entry point: evaluates a whole Program. The result may be an Error, or None if nothing produced a value."""
        return self.eval(program, env)

    def eval(self, node, env):
        # statements
        if isinstance(node, ast.Program):
            return self.eval_program(node, env)
        if isinstance(node, ast.BlockStatement):
            return self.eval_block_statement(node, env)
        if isinstance(node, ast.ExpressionStatement):
            return self.eval(node.expression, env)
        if isinstance(node, ast.LetStatement):
            value = self.eval(node.value, env)
            if is_error(value):
                return value
            env.set(node.name.name, value)
            return None
        if isinstance(node, ast.ReturnStatement):
            value = self.eval(node.value, env)
            if is_error(value):
                return value
            return ReturnValue(value)

        # literals
        if isinstance(node, ast.IntegerLiteral):
            return Integer(node.value)
        if isinstance(node, ast.BooleanLiteral):
            return native_bool(node.value)
        if isinstance(node, ast.NullLiteral):
            return NULL
        if isinstance(node, ast.StringLiteral):
            return String(node.value)
        if isinstance(node, ast.ArrayLiteral):
            elements = self.eval_expressions(node.elements, env)
            if len(elements) == 1 and is_error(elements[0]):
                return elements[0]
            return Array(elements)
        if isinstance(node, ast.MapLiteral):
            return self.eval_map_literal(node, env)
        if isinstance(node, ast.FunctionLiteral):
            return Function(node.parameters, node.body, env)

        # expressions
        if isinstance(node, ast.Identifier):
            return self.eval_identifier(node, env)
        if isinstance(node, ast.PrefixExpression):
            right = self.eval(node.right, env)
            if is_error(right):
                return right
            return self.eval_prefix_expression(node.operator, right)
        if isinstance(node, ast.InfixExpression):
            left = self.eval(node.left, env)
            if is_error(left):
                return left
            right = self.eval(node.right, env)
            if is_error(right):
                return right
            return self.eval_infix_expression(node.operator, left, right)
        if isinstance(node, ast.IfExpression):
            return self.eval_if_expression(node, env)
        if isinstance(node, ast.CallExpression):
            function = self.eval(node.function, env)
            if is_error(function):
                return function
            arguments = self.eval_expressions(node.arguments, env)
            if len(arguments) == 1 and is_error(arguments[0]):
                return arguments[0]
            return self.apply_function(function, arguments)
        if isinstance(node, ast.IndexExpression):
            left = self.eval(node.left, env)
            if is_error(left):
                return left
            index = self.eval(node.index, env)
            if is_error(index):
                return index
            return self.eval_index_expression(left, index)

        raise TypeError(f"cannot evaluate {type(node).__name__}")

    # ======== statements ========

    def eval_program(self, program, env):
        result = None
        for statement in program.statements:
            result = self.eval(statement, env)
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, Error):
                return result
        return result

    def eval_block_statement(self, block, env):
        result = None
        for statement in block.statements:
            result = self.eval(statement, env)
            if result is not None and result.type() in (ObjectType.RETURN_VALUE, ObjectType.ERROR):
                return result
        return result

    def eval_expressions(self, expressions, env):
        """Evaluates expressions left to right. On the first Error, returns a list holding only that Error."""
        results = []
        for expression in expressions:
            evaluated = self.eval(expression, env)
            if is_error(evaluated):
                return [evaluated]
            results.append(evaluated)
        return results

    # ======== expressions ========

    def eval_identifier(self, node, env):
        value = env.get(node.name)
        if value is not None:
            return value

        builtin = self.builtins.get(node.name)
        if builtin is not None:
            return builtin

        return Error(f"identifier not found: {node.name}")

    def eval_prefix_expression(self, operator, right):
        if operator == "!":
            return native_bool(not is_truthy(right))
        if operator == "-":
            if not isinstance(right, Integer):
                return Error(f"unknown operator: -{right.type()}")
            return Integer(-right.value)
        return Error(f"unknown operator: {operator}{right.type()}")

    def eval_infix_expression(self, operator, left, right):
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self.eval_integer_infix_expression(operator, left, right)
        if isinstance(left, String) and isinstance(right, String):
            return self.eval_string_infix_expression(operator, left, right)
        # booleans and null are singletons, so identity is equality for them
        if operator == "==":
            return native_bool(left is right)
        if operator == "!=":
            return native_bool(left is not right)
        if left.type() != right.type():
            return Error(f"type mismatch: {left.type()} {operator} {right.type()}")
        return Error(f"unknown operator: {left.type()} {operator} {right.type()}")

    @staticmethod
    def eval_integer_infix_expression(operator, left, right):
        a, b = left.value, right.value
        if operator == "+":
            return Integer(a + b)
        if operator == "-":
            return Integer(a - b)
        if operator == "*":
            return Integer(a * b)
        if operator == "/":
            if b == 0:
                return Error("division by zero")
            return Integer(truncated_division(a, b))
        if operator == "<":
            return native_bool(a < b)
        if operator == ">":
            return native_bool(a > b)
        if operator == "==":
            return native_bool(a == b)
        if operator == "!=":
            return native_bool(a != b)
        return Error(f"unknown operator: {left.type()} {operator} {right.type()}")

    @staticmethod
    def eval_string_infix_expression(operator, left, right):
        if operator == "+":
            return String(left.value + right.value)
        if operator == "==":
            return native_bool(left.value == right.value)
        if operator == "!=":
            return native_bool(left.value != right.value)
        return Error(f"unknown operator: {left.type()} {operator} {right.type()}")

    def eval_if_expression(self, node, env):
        condition = self.eval(node.condition, env)
        if is_error(condition):
            return condition

        if is_truthy(condition):
            result = self.eval(node.consequence, env)
        elif node.alternative is not None:
            result = self.eval(node.alternative, env)
        else:
            return NULL

        return NULL if result is None else result

    def apply_function(self, function, arguments):
        if isinstance(function, Function):
            if len(arguments) != len(function.parameters):
                return Error(f"wrong number of arguments: expected {len(function.parameters)}, got {len(arguments)}")

            call_env = Environment.new_enclosed(function.env)
            for param, arg in zip(function.parameters, arguments):
                call_env.set(param.name, arg)

            return unwrap_return_value(self.eval(function.body, call_env))

        if isinstance(function, Builtin):
            return function(*arguments)

        return Error(f"not a function: {function.type()}")

    def eval_index_expression(self, left, index):
        if isinstance(left, (Array, String)):
            if not isinstance(index, Integer):
                return Error(f"invalid index type for {left.type()}: {index.type()}")

            # strings index their UTF-8 bytes; each byte comes back as the character with that code (U+0000-U+00FF)
            items = left.elements if isinstance(left, Array) else left.value.encode("utf-8")
            if not 0 <= index.value < len(items):
                return Error(f"index out of range: index {index.value}, length {len(items)}")

            return items[index.value] if isinstance(left, Array) else String(chr(items[index.value]))

        if isinstance(left, Map):
            if not isinstance(index, Hashable):
                return Error(f"invalid map key type: {index.type()}")
            pair = left.pairs.get(index.hash_key())
            return NULL if pair is None else pair.value

        return Error(f"could not index {left.type()}")

    def eval_map_literal(self, node, env):
        pairs = {}
        for key_node, value_node in node.pairs:
            key = self.eval(key_node, env)
            if is_error(key):
                return key
            if not isinstance(key, Hashable):
                return Error(f"invalid map key type: {key.type()}")

            value = self.eval(value_node, env)
            if is_error(value):
                return value

            pairs[key.hash_key()] = MapPair(key, value)

        return Map(pairs)
