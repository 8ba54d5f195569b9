"""The Mandrill programming language: a tree-walking interpreter."""

__version__ = "0.1.0"
