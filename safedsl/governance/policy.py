"""
safedsl Security Policy

A pure, stateless allow/deny layer consulted by the tokenizer, the parser and
the executor. One audit surface guards parse time and execution time.

Checks:
- Denylist: closed set of capability-escaping names, matched exactly
- Shape: method names must look like plain lower-case DSL identifiers
- Allowlist: optional closed set of names a capability context exposes
- Metacharacters: shell sequences refused in any identifier text

Key classes:
- SecurityPolicy: Policy instance (denylist + optional allowlist)
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, Optional

from safedsl.errors import Position, SecurityError

# Names that evaluate code, reflect, spawn processes, touch files or load code.
DENIED_METHODS: FrozenSet[str] = frozenset({
    # code evaluation
    "eval", "instance_eval", "class_eval", "module_eval",
    "instance_exec", "class_exec", "module_exec", "binding",
    "compile", "exec", "execfile",
    # reflection and dynamic dispatch
    "send", "__send__", "public_send", "method", "methods",
    "public_method", "singleton_method", "define_method",
    "define_singleton_method", "method_missing", "respond_to",
    "instance_variable_get", "instance_variable_set",
    "instance_variables", "class_variable_get", "class_variable_set",
    "const_get", "const_set", "const_missing", "remove_const",
    "constantize", "safe_constantize",
    "constants", "ancestors", "superclass", "singleton_class",
    "extend", "include", "prepend", "tap", "then", "yield_self",
    "object_space", "getattr", "setattr", "delattr", "hasattr",
    "globals", "locals", "vars", "dir", "type", "mro", "subclasses",
    # processes
    "system", "spawn", "syscall", "fork", "popen", "popen2", "popen3",
    "capture2", "capture3", "pipeline", "exit", "abort", "at_exit",
    "trap", "kill", "sleep", "subprocess", "process", "kernel",
    "os", "sys", "shell", "sh",
    # files and IO
    "open", "read", "readlines", "write", "binread", "binwrite",
    "file", "io", "pathname", "fileutils", "tempfile", "syswrite",
    "sysread", "unlink", "delete", "rename", "chmod", "chown",
    "mkdir", "rmdir", "glob", "gets", "puts", "print", "printf",
    "putc", "display",
    # loading external code
    "require", "require_relative", "load", "autoload", "import",
    "importlib", "import_module", "gem", "socket", "net_http",
})

SHELL_METACHARACTERS: FrozenSet[str] = frozenset({
    ";", "`", "$(", "|", "&&", "\n", "\x00",
})

_LOWER = frozenset("abcdefghijklmnopqrstuvwxyz")
_IDENT_START = _LOWER | {"_"}
_IDENT_REST = _IDENT_START | frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789")


def has_method_shape(name: str) -> bool:
    """True for names matching ``[a-z][a-zA-Z0-9_]*``."""
    if not name or name[0] not in _LOWER:
        return False
    return all(ch in _IDENT_REST for ch in name[1:])


class SecurityPolicy:
    """
    Allow/deny predicate over method names and identifier text.

    Instances are immutable; the same input always gets the same verdict.
    """

    def __init__(self,
                 allowed_methods: Optional[Iterable[str]] = None,
                 denied_methods: FrozenSet[str] = DENIED_METHODS):
        self._denied = frozenset(denied_methods)
        self._allowed = frozenset(allowed_methods) if allowed_methods is not None else None

    @property
    def allowed_methods(self) -> Optional[FrozenSet[str]]:
        return self._allowed

    def is_denied(self, name: str) -> bool:
        """True if the name is on the denylist (case-insensitive)."""
        return name in self._denied or name.lower() in self._denied

    def is_method_allowed(self, name: str) -> bool:
        """Decide whether a method name may ever become a call node."""
        if not isinstance(name, str) or not has_method_shape(name):
            return False
        if self.is_denied(name):
            return False
        if self._allowed is not None and name not in self._allowed:
            return False
        return True

    def is_identifier_suspicious(self, text: str) -> bool:
        """True if the text carries a shell metacharacter sequence."""
        if not isinstance(text, str):
            return True
        return any(seq in text for seq in SHELL_METACHARACTERS)

    def denial_reason(self, name: str) -> str:
        if self.is_identifier_suspicious(name):
            return "contains a shell metacharacter sequence"
        if not has_method_shape(name):
            return "is not a valid DSL method name"
        if self.is_denied(name):
            return "is not allowed in the DSL"
        return "is not an operation of this context"

    def check_method(self, name: str, position: Optional[Position] = None) -> None:
        """Raise SecurityError unless the method name is allowed."""
        if not self.is_method_allowed(name):
            raise SecurityError(name, self.denial_reason(name), position)

    def check_identifier(self, text: str, position: Optional[Position] = None) -> None:
        """Raise SecurityError for suspicious keys and symbol names."""
        if self.is_identifier_suspicious(text):
            raise SecurityError(text, "contains a shell metacharacter sequence", position)

    def with_allowlist(self, allowed_methods: Iterable[str]) -> "SecurityPolicy":
        """Return a copy restricted to the given method names."""
        return SecurityPolicy(allowed_methods=allowed_methods, denied_methods=self._denied)

    def __repr__(self) -> str:
        allowed = "none" if self._allowed is None else str(len(self._allowed))
        return f"SecurityPolicy(denied={len(self._denied)}, allowed={allowed})"


DEFAULT_POLICY = SecurityPolicy()


def is_method_allowed(name: str) -> bool:
    """Default-policy check for a method name."""
    return DEFAULT_POLICY.is_method_allowed(name)


def is_identifier_suspicious(text: str) -> bool:
    """Default-policy check for shell metacharacters."""
    return DEFAULT_POLICY.is_identifier_suspicious(text)
