"""One OS pipe per captured stream."""

import os
from dataclasses import dataclass

from pgrun.errors import LaunchError


@dataclass
class PipeEndpointPair:
    name: str
    read_fd: int | None
    write_fd: int | None

    def close_read(self) -> None:
        if self.read_fd is not None:
            fd, self.read_fd = self.read_fd, None
            os.close(fd)

    def close_write(self) -> None:
        if self.write_fd is not None:
            fd, self.write_fd = self.write_fd, None
            os.close(fd)


class PipeSet:
    """Owns every pipe opened for a single invocation.

    The write end of each pair belongs to the child once it has started;
    the parent must call close_writers() right after the spawn so the read
    ends see EOF when the child (and anything it forked) exits. close()
    releases whatever is still open and is safe to call more than once.
    """

    def __init__(self):
        self._pairs: dict[str, PipeEndpointPair] = {}

    def open(self, name: str) -> PipeEndpointPair:
        if name in self._pairs:
            raise ValueError(f"pipe already open for stream {name!r}")
        try:
            # os.pipe() fds are non-inheritable; the spawn dup2s the write end
            rd, wr = os.pipe()
        except OSError as e:
            raise LaunchError(f"cannot create pipe for {name}: {e}") from e
        pair = PipeEndpointPair(name=name, read_fd=rd, write_fd=wr)
        self._pairs[name] = pair
        return pair

    def __getitem__(self, name: str) -> PipeEndpointPair:
        return self._pairs[name]

    def close_writers(self) -> None:
        for pair in self._pairs.values():
            pair.close_write()

    def close(self) -> None:
        for pair in self._pairs.values():
            pair.close_write()
            pair.close_read()

    def __enter__(self) -> "PipeSet":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
