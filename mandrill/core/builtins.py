"""Pure builtin functions. Each one takes Objects positionally and returns an Object, reporting misuse as an Error value.
Strings are measured and sliced in characters (code points), not bytes.
"""

from types import MappingProxyType

from mandrill.core.object import NULL, Array, Builtin, Error, Integer, Map, String


def argument_count_error(expected, given, at_least=False):
    noun = "argument" if expected == 1 else "arguments"
    quantifier = "expected at least" if at_least else "expected"
    return Error(f"{quantifier} {expected} {noun}, received {given}")


def invalid_argument_error(name, arg):
    return Error(f"invalid argument for the `{name}` function, got {arg.type()}")


def builtin_len(*args):
    if len(args) != 1:
        return argument_count_error(1, len(args))

    arg = args[0]
    if isinstance(arg, String):
        return Integer(len(arg.value))
    if isinstance(arg, Array):
        return Integer(len(arg.elements))
    if isinstance(arg, Map):
        return Integer(len(arg.pairs))
    return invalid_argument_error("len", arg)


def builtin_first(*args):
    if len(args) != 1:
        return argument_count_error(1, len(args))

    arg = args[0]
    if isinstance(arg, Array):
        return arg.elements[0] if arg.elements else NULL
    if isinstance(arg, String):
        return String(arg.value[0]) if arg.value else NULL
    return invalid_argument_error("first", arg)


def builtin_last(*args):
    if len(args) != 1:
        return argument_count_error(1, len(args))

    arg = args[0]
    if isinstance(arg, Array):
        return arg.elements[-1] if arg.elements else NULL
    if isinstance(arg, String):
        return String(arg.value[-1]) if arg.value else NULL
    return invalid_argument_error("last", arg)


def builtin_skip(*args):
    """skip(seq, n) drops the first n elements/characters. Skipping past the end gives an empty result, and a negative
    n skips nothing.
    """
    if len(args) != 2:
        return argument_count_error(2, len(args))

    arg, count = args
    if not isinstance(count, Integer):
        return invalid_argument_error("skip", count)
    start = max(count.value, 0)

    if isinstance(arg, Array):
        return Array(arg.elements[start:])
    if isinstance(arg, String):
        return String(arg.value[start:])
    return invalid_argument_error("skip", arg)


def builtin_append(*args):
    """append(array, values...) returns a new Array, leaving the original untouched."""
    if len(args) < 2:
        return argument_count_error(2, len(args), at_least=True)

    arg = args[0]
    if not isinstance(arg, Array):
        return invalid_argument_error("append", arg)
    return Array(arg.elements + list(args[1:]))


CORE_BUILTINS = {
    "len": builtin_len,
    "first": builtin_first,
    "last": builtin_last,
    "skip": builtin_skip,
    "append": builtin_append,
}


def builtin_table(*extra):
    """Returns a read-only name -> Builtin mapping of the core builtins, extended with any extra {name: callable}
    mappings (later mappings win).
    """
    table = {}
    for functions in (CORE_BUILTINS, *extra):
        for name, fn in functions.items():
            table[name] = Builtin(name, fn)
    return MappingProxyType(table)
