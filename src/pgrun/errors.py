"""Error taxonomy + SubprocessError message rendering."""

from dataclasses import dataclass

from pgrun.result import Result


class PgrunError(Exception):
    """Base class for every error raised by pgrun."""


class LaunchError(PgrunError):
    """Pipe creation, spawn, chdir or exec failed. Never retried."""


class RunnerStateError(PgrunError, RuntimeError):
    """A Runner was driven out of sequence (usage bug)."""


@dataclass(frozen=True)
class ExplicitMessage:
    text: str


@dataclass(frozen=True)
class DerivedFromResult:
    result: Result


MessageSource = ExplicitMessage | DerivedFromResult


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def render_message(source: MessageSource) -> str:
    if isinstance(source, ExplicitMessage):
        return source.text
    result = source.result
    stderr = _text(result.stderr).removesuffix("\n")
    return f"Command {result.cmd} exited with {result.exit_code}: {stderr}"


class SubprocessError(PgrunError):
    """Raised by execute() in fail-fast mode when the child crashed.

    Built either from an explicit message or from the Result itself; the
    Result (when given) stays reachable through ``.result`` either way.
    """

    def __init__(self, message: str | None = None, result: Result | None = None):
        if message is None and result is None:
            raise ValueError("SubprocessError needs a message or a result")
        if message is not None:
            self.source: MessageSource = ExplicitMessage(message)
        else:
            self.source = DerivedFromResult(result)
        self.result = result
        super().__init__(render_message(self.source))

    def __str__(self) -> str:
        return render_message(self.source)
