"""Immutable record of a finished command."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Result:
    command: tuple[str, ...]
    stdout: bytes
    stderr: bytes
    exit_code: int

    @property
    def cmd(self) -> str:
        return " ".join(self.command)

    @property
    def crashed(self) -> bool:
        """True for a non-zero exit or death by signal (negative exit code)."""
        return self.exit_code != 0
