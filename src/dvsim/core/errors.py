from __future__ import annotations


class DvsimError(Exception):
    """Base class for simulator failures reported to the operator."""


class ConfigError(DvsimError, ValueError):
    pass


class InputFileError(DvsimError):
    def __init__(self, kind: str, path: str) -> None:
        super().__init__(f"Cannot open {kind} file: {path}")
        self.kind = kind
        self.path = path


class ParseError(DvsimError, ValueError):
    def __init__(self, path: str, lineno: int, reason: str) -> None:
        super().__init__(f"{path}:{lineno}: {reason}")
        self.path = path
        self.lineno = lineno
        self.reason = reason


class InconsistentTopologyError(DvsimError, KeyError):
    def __init__(self, node_id: object) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"inconsistent topology: unknown node {self.node_id!r}"


class ConvergenceError(DvsimError, RuntimeError):
    def __init__(self, sweeps: int, max_sweeps: int) -> None:
        super().__init__(f"no fixed point after {sweeps} sweeps (limit {max_sweeps})")
        self.sweeps = sweeps
        self.max_sweeps = max_sweeps


class RoutingLoopError(DvsimError, RuntimeError):
    def __init__(self, source: object, destination: object, path: list) -> None:
        super().__init__(
            f"next-hop chain from {source!r} to {destination!r} does not terminate: {path!r}"
        )
        self.source = source
        self.destination = destination
        self.path = path
