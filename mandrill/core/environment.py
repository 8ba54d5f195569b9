"""Lexical scopes. Frames are plain Python objects shared by reference between the Functions that closed over them and
any calls in flight, and are reclaimed by the garbage collector once the last holder lets go.
"""


class Environment:
    """A frame of name -> Object bindings chained to an optional enclosing frame."""

    def __init__(self, outer=None):
        self.store = {}
        self.outer = outer

    @classmethod
    def new_enclosed(cls, outer):
        return cls(outer)

    def get(self, name):
        """Returns the innermost binding of name, or None if no frame in the chain binds it."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name, value):
        """Binds name in this frame only, shadowing (never touching) bindings in outer frames."""
        self.store[name] = value
        return value

    def __repr__(self):
        return f"Environment({sorted(self.store)}, outer={self.outer!r})"
