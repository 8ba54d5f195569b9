"""Front end of the Mandrill interpreter: sessions, the shell, error reporting and I/O builtins."""
