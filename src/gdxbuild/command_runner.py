"""Shell command runner with streamed, captured output.

CommandRunner executes one command string at a time through the host shell.
stdout and stderr are merged into a single pipe. A background reader thread
performs blocking reads on that pipe and pushes decoded chunks onto a queue;
the calling thread consumes the queue, echoes each chunk to the console and
appends it to an OutputBuffer. When the stream ends the runner waits for the
process and either returns the captured text or raises ExecutionFailed.

The buffer is drained (cleared) whenever a command starts and whenever its
text is handed back, so output is never delivered twice.
"""

from __future__ import annotations

import codecs
import logging
import queue
import subprocess
import threading
from pathlib import Path
from typing import IO, Callable, Optional

from .errors import ExecutionFailed
from .output import echo as console_echo
from .output import log_command
from .subprocess_utils import safe_popen, shell_argv

logger = logging.getLogger(__name__)

# Marks the end of the merged output stream on the chunk queue
_END_OF_STREAM = object()


class OutputBuffer:
    """Append-only text accumulator guarded by a lock."""

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self._lock = threading.Lock()

    def append(self, chunk: str) -> None:
        with self._lock:
            self._chunks.append(chunk)

    def drain(self) -> str:
        """Return everything captured so far and reset the buffer."""
        with self._lock:
            content = "".join(self._chunks)
            self._chunks.clear()
        return content

    def __len__(self) -> int:
        with self._lock:
            return sum(len(chunk) for chunk in self._chunks)


class CommandRunner:
    """Runs shell commands sequentially, streaming and capturing output.

    Only one command can be in flight per runner; concurrent callers block on
    the command lock until the running command has finished.
    """

    def __init__(
        self,
        shell: Path,
        echo: Optional[Callable[[str], None]] = None,
        chunk_size: int = 4096,
    ):
        """
        Args:
            shell: Shell executable used to interpret command strings
            echo: Observation channel for live output (defaults to console)
            chunk_size: Maximum bytes per read from the output pipe
        """
        self.shell = shell
        self._echo = echo if echo is not None else console_echo
        self._chunk_size = chunk_size
        self._buffer = OutputBuffer()
        self._command_lock = threading.Lock()

    def drain(self) -> str:
        """Discard and return any output left over from a previous command."""
        return self._buffer.drain()

    def run(self, command: str) -> str:
        """Execute a command and return its merged stdout/stderr.

        Args:
            command: Command line passed to the shell verbatim

        Returns:
            Complete captured output (may be empty)

        Raises:
            ExecutionFailed: If the command exits with a non-zero status
        """
        with self._command_lock:
            stale = self._buffer.drain()
            if stale:
                logger.debug(f"Discarded {len(stale)} characters of stale output")

            log_command(command)
            process = safe_popen(
                shell_argv(self.shell, command),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
            if process.stdout is None:
                raise RuntimeError(f"No output pipe for command: {command}")

            chunks: queue.Queue = queue.Queue()
            reader = threading.Thread(
                target=self._read_stream,
                args=(process.stdout, chunks),
                name="gdxbuild-output-reader",
                daemon=True,
            )
            reader.start()

            while True:
                chunk = chunks.get()
                if chunk is _END_OF_STREAM:
                    break
                self._echo(chunk)
                self._buffer.append(chunk)

            exit_code = process.wait()
            reader.join()

            output = self._buffer.drain()
            if exit_code != 0:
                logger.debug(f"Command exited with {exit_code}: {command}")
                raise ExecutionFailed(exit_code, command)
            return output

    def _read_stream(self, stream: IO[bytes], chunks: queue.Queue) -> None:
        """Reader thread body: push decoded chunks until end of stream.

        Characters split across reads are carried over by an incremental
        decoder, so only genuinely invalid bytes are lost.
        """
        decoder = codecs.getincrementaldecoder("utf-8")()
        try:
            while True:
                data = stream.read1(self._chunk_size)  # type: ignore[attr-defined]
                self._decode_into(decoder, data, chunks, final=not data)
                if not data:
                    break
        finally:
            stream.close()
            chunks.put(_END_OF_STREAM)

    @staticmethod
    def _decode_into(decoder: codecs.IncrementalDecoder, data: bytes, chunks: queue.Queue, final: bool) -> None:
        try:
            text = decoder.decode(data, final=final)
        except UnicodeDecodeError:
            # Undecodable output is lost telemetry, never fatal
            logger.debug(f"Dropped {len(data)} bytes of undecodable output")
            decoder.reset()
            return
        if text:
            chunks.put(text)
