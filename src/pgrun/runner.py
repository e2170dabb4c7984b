"""A single child launch: new session, redirected streams, optional cwd."""

import enum
import os
import signal
import subprocess
from dataclasses import dataclass

from pgrun.errors import LaunchError, RunnerStateError


class State(enum.Enum):
    UNSTARTED = "unstarted"
    RUNNING = "running"
    EXITED = "exited"


@dataclass(frozen=True)
class RunnerConfig:
    """Launch-time parameters. stdout/stderr are pipe write-end fds."""

    stdout: int
    stderr: int
    cwd: str | None = None


class Runner:
    """Owns the lifecycle of one child process.

    UNSTARTED -> RUNNING via start(), RUNNING -> EXITED via wait(). Any other
    ordering is a usage bug and raises RunnerStateError.
    """

    def __init__(self, argv: list[str] | tuple[str, ...]):
        self.argv = tuple(argv)
        self.config: RunnerConfig | None = None
        self.state = State.UNSTARTED
        self.pid: int | None = None
        self.pgid: int | None = None
        self.signaled = False
        self.term_signal: int | None = None
        self._proc: subprocess.Popen | None = None
        self._returncode: int | None = None

    def configure(self, config: RunnerConfig) -> None:
        if self.state is not State.UNSTARTED:
            raise RunnerStateError(f"cannot configure a {self.state.value} runner")
        self.config = config

    def start(self) -> None:
        if self.state is not State.UNSTARTED:
            raise RunnerStateError(f"cannot start a {self.state.value} runner")
        if self.config is None:
            raise RunnerStateError("configure() must be called before start()")

        # start_new_session runs setsid() in the child between fork and exec;
        # a failed chdir/exec there is reported back here as an OSError and
        # the child exits without running anything else.
        try:
            self._proc = subprocess.Popen(
                self.argv,
                stdin=subprocess.DEVNULL,
                stdout=self.config.stdout,
                stderr=self.config.stderr,
                cwd=self.config.cwd,
                start_new_session=True,
                close_fds=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise LaunchError(f"failed to launch {' '.join(self.argv)}: {e}") from e

        self.pid = self._proc.pid
        self.pgid = self._proc.pid
        self.state = State.RUNNING

    def wait(self) -> int:
        """Block until the child exits. Safe to call again once exited."""
        if self.state is State.UNSTARTED:
            raise RunnerStateError("wait() called before start()")
        if self.state is State.RUNNING:
            self._returncode = self._proc.wait()
            if self._returncode < 0:
                self.signaled = True
                self.term_signal = -self._returncode
            self.state = State.EXITED
        return self._returncode

    def kill_group(self, sig: int = signal.SIGKILL) -> None:
        """Signal every process left in the child's group.

        Also valid after wait(): the pgid stays reserved while any member
        (e.g. a backgrounded grandchild holding the pipes) is alive.
        """
        if self.state is State.UNSTARTED:
            return
        try:
            os.killpg(self.pgid, sig)
        except ProcessLookupError:
            pass

    @property
    def running(self) -> bool:
        return self.state is State.RUNNING

    @property
    def exit_code(self) -> int:
        """Exit status; -N when the child was killed by signal N."""
        if self.state is not State.EXITED:
            raise RunnerStateError("exit code is only known after wait()")
        return self._returncode

    @property
    def crashed(self) -> bool:
        return self.exit_code != 0
