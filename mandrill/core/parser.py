"""Pratt (operator-precedence) recursive-descent parser for the Mandrill language.

Every token type may own a prefix rule (it can start an expression) and/or an infix rule (it can continue one, given
the expression to its left). parse_expression keeps folding infix rules into the left-hand side for as long as the
upcoming operator binds tighter than the caller's precedence, which yields left associativity and the precedence
ladder below without any grammar table:

```
LOWEST < EQUALS (== !=) < COMPARISON (< >) < SUM (+ -) < PRODUCT (* /) < PREFIX (! -) < CALL (() < INDEX ([)
```

Syntax errors never raise: they are collected in Parser.errors (and the offending tokens in Parser.error_tokens) while
the parser skips the construct that failed and carries on with the next statement.
"""

from enum import IntEnum
from functools import wraps

from mandrill.core import ast
from mandrill.core.lexer import Lexer, TokenType

INT64_MAX = 2 ** 63 - 1


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2
    COMPARISON = 3
    SUM = 4
    PRODUCT = 5
    PREFIX = 6
    CALL = 7
    INDEX = 8


PRECEDENCES = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.COMPARISON,
    TokenType.GT: Precedence.COMPARISON,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACKET: Precedence.INDEX,
}


def traced(method):
    """Prints an indented BEGIN/END pair around a parse rule when the parser was built with trace=True."""
    name = method.__name__.lstrip("_")

    @wraps(method)
    def wrapper(self, *args, **kwargs):
        if not self.trace:
            return method(self, *args, **kwargs)

        self.trace_level += 1
        print(f"{'    ' * (self.trace_level - 1)}BEGIN {name}")
        try:
            return method(self, *args, **kwargs)
        finally:
            print(f"{'    ' * (self.trace_level - 1)}END {name}")
            self.trace_level -= 1

    return wrapper


class Parser:
    """Builds a Program from the tokens of a Lexer. A Parser, like its Lexer, is good for exactly one parse."""

    def __init__(self, lexer, trace=False):
        self.lexer = lexer
        self.trace = trace
        self.trace_level = 0

        self.errors = []
        self.error_tokens = []

        self.prefix_rules = {
            TokenType.IDENT: self.parse_identifier,
            TokenType.INT: self.parse_integer_literal,
            TokenType.STRING: self.parse_string_literal,
            TokenType.TRUE: self.parse_boolean_literal,
            TokenType.FALSE: self.parse_boolean_literal,
            TokenType.NULL: self.parse_null_literal,
            TokenType.BANG: self.parse_prefix_expression,
            TokenType.MINUS: self.parse_prefix_expression,
            TokenType.LPAREN: self.parse_grouped_expression,
            TokenType.IF: self.parse_if_expression,
            TokenType.FUNCTION: self.parse_function_literal,
            TokenType.LBRACKET: self.parse_array_literal,
            TokenType.LBRACE: self.parse_map_literal,
            TokenType.ILLEGAL: self.parse_illegal,
        }

        self.infix_rules = {token_type: self.parse_infix_expression for token_type in PRECEDENCES}
        self.infix_rules[TokenType.LPAREN] = self.parse_call_expression
        self.infix_rules[TokenType.LBRACKET] = self.parse_index_expression

        self.current_token = self.lexer.next_token()
        self.peek_token = self.lexer.next_token()

    # ======== token plumbing ========

    def next_token(self):
        self.current_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def current_is(self, token_type):
        return self.current_token.type == token_type

    def peek_is(self, token_type):
        return self.peek_token.type == token_type

    def expect_peek(self, token_type):
        """Advances if the next token is of token_type, otherwise records an error and stays put."""
        if self.peek_is(token_type):
            self.next_token()
            return True
        self.unexpected(token_type, self.peek_token)
        return False

    def peek_precedence(self):
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def current_precedence(self):
        return PRECEDENCES.get(self.current_token.type, Precedence.LOWEST)

    # ======== errors ========

    def error(self, msg, token):
        self.errors.append(msg)
        self.error_tokens.append(token)

    def unexpected(self, expected, token):
        self.error(f"expected next token to be {expected.name}, got {token.type.name} ('{token.literal}') instead",
                   token)

    # ======== statements ========

    def parse_program(self):
        program = ast.Program()
        while not self.current_is(TokenType.EOF):
            statement = self.parse_statement()
            if statement is not None:
                program.statements.append(statement)
            self.next_token()
        return program

    @traced
    def parse_statement(self):
        if self.current_is(TokenType.LET):
            return self.parse_let_statement()
        if self.current_is(TokenType.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    @traced
    def parse_let_statement(self):
        token = self.current_token
        if not self.expect_peek(TokenType.IDENT):
            return None
        name = ast.Identifier(self.current_token, self.current_token.literal)

        if not self.expect_peek(TokenType.ASSIGN):
            return None
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_is(TokenType.SEMICOLON):
            self.next_token()
        return ast.LetStatement(token, name, value)

    @traced
    def parse_return_statement(self):
        token = self.current_token
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_is(TokenType.SEMICOLON):
            self.next_token()
        return ast.ReturnStatement(token, value)

    @traced
    def parse_expression_statement(self):
        token = self.current_token
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        if self.peek_is(TokenType.SEMICOLON):
            self.next_token()
        return ast.ExpressionStatement(token, expression)

    @traced
    def parse_block_statement(self):
        block = ast.BlockStatement(self.current_token)
        self.next_token()

        while not self.current_is(TokenType.RBRACE):
            if self.current_is(TokenType.EOF):
                self.unexpected(TokenType.RBRACE, self.current_token)
                return None
            statement = self.parse_statement()
            if statement is not None:
                block.statements.append(statement)
            self.next_token()

        return block

    # ======== expressions ========

    @traced
    def parse_expression(self, precedence):
        prefix = self.prefix_rules.get(self.current_token.type)
        if prefix is None:
            token = self.current_token
            self.error(f"no prefix parse function for {token.type.name} ('{token.literal}') found", token)
            return None

        left = prefix()
        while left is not None and not self.peek_is(TokenType.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_rules.get(self.peek_token.type)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self):
        return ast.Identifier(self.current_token, self.current_token.literal)

    @traced
    def parse_integer_literal(self):
        token = self.current_token
        value = int(token.literal)
        if value > INT64_MAX:
            self.error(f"could not parse '{token.literal}' as integer", token)
            return None
        return ast.IntegerLiteral(token, value)

    def parse_string_literal(self):
        return ast.StringLiteral(self.current_token, self.current_token.literal)

    def parse_boolean_literal(self):
        return ast.BooleanLiteral(self.current_token, self.current_is(TokenType.TRUE))

    def parse_null_literal(self):
        return ast.NullLiteral(self.current_token)

    def parse_illegal(self):
        token = self.current_token
        self.error(f"illegal token '{token.literal}' at {token.lineno}:{token.column}", token)
        return None

    @traced
    def parse_prefix_expression(self):
        token = self.current_token
        self.next_token()

        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return ast.PrefixExpression(token, token.literal, right)

    @traced
    def parse_infix_expression(self, left):
        token = self.current_token
        precedence = self.current_precedence()
        self.next_token()

        right = self.parse_expression(precedence)
        if right is None:
            return None
        return ast.InfixExpression(token, left, token.literal, right)

    @traced
    def parse_grouped_expression(self):
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None or not self.expect_peek(TokenType.RPAREN):
            return None
        return expression

    @traced
    def parse_if_expression(self):
        token = self.current_token
        if not self.expect_peek(TokenType.LPAREN):
            return None
        self.next_token()

        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None or not self.expect_peek(TokenType.RPAREN) or not self.expect_peek(TokenType.LBRACE):
            return None

        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_is(TokenType.ELSE):
            self.next_token()
            if not self.expect_peek(TokenType.LBRACE):
                return None
            alternative = self.parse_block_statement()
            if alternative is None:
                return None

        return ast.IfExpression(token, condition, consequence, alternative)

    @traced
    def parse_function_literal(self):
        token = self.current_token
        if not self.expect_peek(TokenType.LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None or not self.expect_peek(TokenType.LBRACE):
            return None

        body = self.parse_block_statement()
        if body is None:
            return None
        return ast.FunctionLiteral(token, parameters, body)

    def parse_function_parameters(self):
        parameters = []
        if self.peek_is(TokenType.RPAREN):
            self.next_token()
            return parameters

        if not self.expect_peek(TokenType.IDENT):
            return None
        parameters.append(ast.Identifier(self.current_token, self.current_token.literal))

        while self.peek_is(TokenType.COMMA):
            self.next_token()
            if not self.expect_peek(TokenType.IDENT):
                return None
            parameters.append(ast.Identifier(self.current_token, self.current_token.literal))

        if not self.expect_peek(TokenType.RPAREN):
            return None
        return parameters

    @traced
    def parse_call_expression(self, function):
        token = self.current_token
        arguments = self.parse_expression_list(TokenType.RPAREN)
        if arguments is None:
            return None
        return ast.CallExpression(token, function, arguments)

    @traced
    def parse_index_expression(self, left):
        token = self.current_token
        self.next_token()

        index = self.parse_expression(Precedence.LOWEST)
        if index is None or not self.expect_peek(TokenType.RBRACKET):
            return None
        return ast.IndexExpression(token, left, index)

    @traced
    def parse_array_literal(self):
        token = self.current_token
        elements = self.parse_expression_list(TokenType.RBRACKET)
        if elements is None:
            return None
        return ast.ArrayLiteral(token, elements)

    def parse_expression_list(self, end):
        """Parses comma-separated expressions up to and including the end token. Returns None on a syntax error."""
        expressions = []
        if self.peek_is(end):
            self.next_token()
            return expressions

        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        expressions.append(expression)

        while self.peek_is(TokenType.COMMA):
            self.next_token()
            self.next_token()
            expression = self.parse_expression(Precedence.LOWEST)
            if expression is None:
                return None
            expressions.append(expression)

        if not self.expect_peek(end):
            return None
        return expressions

    @traced
    def parse_map_literal(self):
        token = self.current_token
        pairs = []

        while not self.peek_is(TokenType.RBRACE):
            self.next_token()
            key = self.parse_expression(Precedence.LOWEST)
            if key is None or not self.expect_peek(TokenType.COLON):
                return None

            self.next_token()
            value = self.parse_expression(Precedence.LOWEST)
            if value is None:
                return None
            pairs.append((key, value))

            if not self.peek_is(TokenType.RBRACE) and not self.expect_peek(TokenType.COMMA):
                return None

        self.next_token()
        return ast.MapLiteral(token, pairs)


def parse(text, trace=False):
    """Lexes and parses text. Returns (Program, errors); a non-empty error list means the Program may be partial."""
    parser = Parser(Lexer(text), trace=trace)
    program = parser.parse_program()
    return program, parser.errors
