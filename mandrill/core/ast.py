"""Abstract syntax tree for the Mandrill language. Nodes are pure data produced once by the parser and never mutated
afterwards. Every node knows the token it was built from and renders itself back into (re-parseable) source text.

```
<program>   ::= <statement>*
<statement> ::= "let" <ident> "=" <expr> [";"]
              | "return" <expr> [";"]
              | <expr> [";"]
<block>     ::= "{" <statement>* "}"
```
"""

from abc import ABC, abstractmethod


class Node(ABC):
    """Superclass for every AST node."""

    def __init__(self, token):
        self.token = token

    def token_literal(self):
        return self.token.literal

    @abstractmethod
    def __str__(self):
        """Canonical rendering of this node as source text."""

    def __repr__(self):
        return f"{type(self).__name__}('{self}')"


class Statement(Node, ABC):
    pass


class Expression(Node, ABC):
    pass


def render_statements(statements):
    """Renders a statement sequence. Expression statements followed by another statement get a ";" so the next one
    cannot be read as a call or index on them.
    """
    rendered = []
    for i, statement in enumerate(statements):
        text = str(statement)
        if isinstance(statement, ExpressionStatement) and i < len(statements) - 1:
            text += ";"
        rendered.append(text)
    return " ".join(rendered)


class Program(Node):
    """Root of every parse. Has no token of its own."""

    def __init__(self, statements=None):
        super().__init__(None)
        self.statements = statements if statements is not None else []

    def token_literal(self):
        return self.statements[0].token_literal() if self.statements else ""

    def __str__(self):
        return render_statements(self.statements)


# ======== statements ========


class LetStatement(Statement):

    def __init__(self, token, name, value):
        super().__init__(token)
        self.name = name
        self.value = value

    def __str__(self):
        return f"{self.token_literal()} {self.name} = {self.value};"


class ReturnStatement(Statement):

    def __init__(self, token, value):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return f"{self.token_literal()} {self.value};"


class ExpressionStatement(Statement):

    def __init__(self, token, expression):
        super().__init__(token)
        self.expression = expression

    def __str__(self):
        return str(self.expression)


class BlockStatement(Statement):

    def __init__(self, token, statements=None):
        super().__init__(token)
        self.statements = statements if statements is not None else []

    def __str__(self):
        return render_statements(self.statements)


# ======== expressions ========


class Identifier(Expression):

    def __init__(self, token, name):
        super().__init__(token)
        self.name = name

    def __str__(self):
        return self.name


class IntegerLiteral(Expression):

    def __init__(self, token, value):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return self.token_literal()


class BooleanLiteral(Expression):

    def __init__(self, token, value):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return self.token_literal()


class NullLiteral(Expression):

    def __str__(self):
        return self.token_literal()


class StringLiteral(Expression):

    def __init__(self, token, value):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return f"\"{self.value}\""


class ArrayLiteral(Expression):

    def __init__(self, token, elements=None):
        super().__init__(token)
        self.elements = elements if elements is not None else []

    def __str__(self):
        return "[" + ", ".join(str(element) for element in self.elements) + "]"


class MapLiteral(Expression):
    """pairs is a list of (key, value) expression tuples in written order."""

    def __init__(self, token, pairs=None):
        super().__init__(token)
        self.pairs = pairs if pairs is not None else []

    def __str__(self):
        return "{" + ", ".join(f"{key}: {value}" for key, value in self.pairs) + "}"


class PrefixExpression(Expression):

    def __init__(self, token, operator, right):
        super().__init__(token)
        self.operator = operator
        self.right = right

    def __str__(self):
        return f"({self.operator}{self.right})"


class InfixExpression(Expression):

    def __init__(self, token, left, operator, right):
        super().__init__(token)
        self.left = left
        self.operator = operator
        self.right = right

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


class IfExpression(Expression):

    def __init__(self, token, condition, consequence, alternative=None):
        super().__init__(token)
        self.condition = condition
        self.consequence = consequence
        self.alternative = alternative

    def __str__(self):
        result = f"if ({self.condition}) {{ {self.consequence} }}"
        if self.alternative is not None:
            result += f" else {{ {self.alternative} }}"
        return result


class FunctionLiteral(Expression):

    def __init__(self, token, parameters, body):
        super().__init__(token)
        self.parameters = parameters
        self.body = body

    def __str__(self):
        params = ", ".join(str(param) for param in self.parameters)
        return f"{self.token_literal()}({params}) {{ {self.body} }}"


class CallExpression(Expression):

    def __init__(self, token, function, arguments=None):
        super().__init__(token)
        self.function = function
        self.arguments = arguments if arguments is not None else []

    def __str__(self):
        return f"{self.function}(" + ", ".join(str(arg) for arg in self.arguments) + ")"


class IndexExpression(Expression):

    def __init__(self, token, left, index):
        super().__init__(token)
        self.left = left
        self.index = index

    def __str__(self):
        return f"({self.left}[{self.index}])"
