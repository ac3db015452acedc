# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the control signals returned by Flagtree action hooks.

Hooks never terminate the process themselves. They return a `ControlSignal`
and the boundary (`Command.run`) turns a terminate signal into an exit code.

Signals:
- CONTINUE: Keep running the remaining hooks.
- ControlSignal.terminate(code): Stop the hook chain and exit with `code`.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SignalKind(Enum):
    """Kinds of control signal a hook can return."""

    CONTINUE = "continue"
    TERMINATE = "terminate"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ControlSignal:
    """
    Result of an action hook.

    Attributes:
        kind (SignalKind): Whether execution continues or terminates.
        exit_code (int): Exit code for the process when terminating.
    """

    kind: SignalKind = SignalKind.CONTINUE
    exit_code: int = 0

    @classmethod
    def terminate(cls, exit_code: int = 0) -> ControlSignal:
        """Return a signal that stops the hook chain with `exit_code`."""
        return cls(SignalKind.TERMINATE, exit_code)

    @property
    def is_terminal(self) -> bool:
        return self.kind == SignalKind.TERMINATE


CONTINUE = ControlSignal()
