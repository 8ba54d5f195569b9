"""Lexer, parser, object model and evaluator of the Mandrill language."""
