"""Run a command to completion and capture both output streams."""

import os
import threading

from pgrun import log
from pgrun.errors import SubprocessError
from pgrun.pipes import PipeSet
from pgrun.result import Result
from pgrun.runner import Runner, RunnerConfig

CHUNK_SIZE = 64 * 1024
ABORT_JOIN_TIMEOUT = 1.0


class _Drain(threading.Thread):
    """Read one pipe until EOF on a background thread."""

    def __init__(self, name: str, fd: int):
        super().__init__(name=f"pgrun-drain-{name}", daemon=True)
        self.fd = fd
        self.chunks: list[bytes] = []
        self.error: OSError | None = None

    def run(self) -> None:
        try:
            while True:
                chunk = os.read(self.fd, CHUNK_SIZE)
                if not chunk:
                    break
                self.chunks.append(chunk)
        except OSError as e:
            self.error = e

    @property
    def data(self) -> bytes:
        return b"".join(self.chunks)


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace").removesuffix("\n")


def execute(
    argv: list[str] | tuple[str, ...],
    cwd: str | None = None,
    raise_on_fail: bool = False,
) -> Result:
    """Run argv in its own process group and return the captured Result.

    Both pipes are drained concurrently while the child runs, so output
    larger than the pipe buffer on either stream cannot deadlock. Every
    pipe fd is closed before returning, on success and failure alike.

    Raises LaunchError if the pipes or the child cannot be created, and
    SubprocessError if raise_on_fail is set and the child crashed.
    """
    command = tuple(argv)
    if not command:
        raise ValueError("argv must not be empty")

    logmsg = f"Execute: {' '.join(command)}"
    if cwd:
        logmsg += f" (cwd: {cwd})"
    log.debug(logmsg)

    runner = Runner(command)
    with PipeSet() as pipes:
        out = pipes.open("stdout")
        err = pipes.open("stderr")
        runner.configure(RunnerConfig(stdout=out.write_fd, stderr=err.write_fd, cwd=cwd))

        try:
            runner.start()
        finally:
            # The child holds its own copies; ours would keep EOF from arriving.
            pipes.close_writers()

        drains = [_Drain("stdout", out.read_fd), _Drain("stderr", err.read_fd)]
        try:
            for drain in drains:
                drain.start()
            runner.wait()
            for drain in drains:
                drain.join()
        except BaseException:
            runner.kill_group()
            runner.wait()
            for drain in drains:
                if drain.is_alive():
                    drain.join(ABORT_JOIN_TIMEOUT)
            raise

    for drain in drains:
        if drain.error is not None:
            raise drain.error

    stdout, stderr = drains[0].data, drains[1].data
    result = Result(command=command, stdout=stdout, stderr=stderr, exit_code=runner.exit_code)

    if result.stdout:
        log.debug(f"[{result.cmd}] STDOUT: {_decode(result.stdout)}")
    if result.stderr:
        log.debug(f"[{result.cmd}] STDERR: {_decode(result.stderr)}")

    if raise_on_fail and result.crashed:
        raise SubprocessError(result=result)

    return result
