# funcbind/execution/engine.py
"""
Engine for running external commands.
"""
import asyncio
import shlex
from typing import Optional, Tuple, Union
from pathlib import Path

from funcbind.constants import DEFAULT_MAX_BUFFER
from funcbind.errors import ProcessExecutionError
from funcbind.utils.logging import get_logger

logger = get_logger(__name__)


class _BufferExceeded(Exception):
    pass


class ExecutionEngine:
    """Runs commands and treats any stderr output as failure."""

    def __init__(self, max_buffer: int = DEFAULT_MAX_BUFFER):
        self._logger = logger
        self._max_buffer = max_buffer

    async def _read_capped(self, stream: asyncio.StreamReader) -> bytes:
        chunks = []
        size = 0
        while True:
            chunk = await stream.read(64 * 1024)
            if not chunk:
                return b"".join(chunks)
            size += len(chunk)
            if size > self._max_buffer:
                raise _BufferExceeded()
            chunks.append(chunk)

    async def run(
        self,
        command: str,
        cwd: Optional[Union[str, Path]] = None
    ) -> Tuple[str, str, int]:
        """
        Execute a command and return its output without judging it.

        Args:
            command: The command line to execute.
            cwd: Working directory for the command.

        Returns:
            A tuple of (stdout, stderr, return_code).

        Raises:
            ProcessExecutionError: If the command cannot be started or its
                output exceeds the buffer cap.
        """
        self._logger.info(f"Executing command: {command}", extra={"cwd": str(cwd) if cwd else None})
        args = shlex.split(command)

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                cwd=str(cwd) if cwd else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            self._logger.exception(f"Error starting command '{command}': {str(e)}")
            raise ProcessExecutionError(f"Failed to start command: {str(e)}", command) from e

        try:
            stdout_bytes, stderr_bytes = await asyncio.gather(
                self._read_capped(process.stdout),
                self._read_capped(process.stderr),
            )
        except _BufferExceeded:
            process.kill()
            await process.wait()
            raise ProcessExecutionError(
                f"Output of '{command}' exceeded {self._max_buffer} bytes",
                command,
                returncode=process.returncode
            )

        returncode = await process.wait()
        stdout = stdout_bytes.decode('utf-8', errors='replace')
        stderr = stderr_bytes.decode('utf-8', errors='replace')

        self._logger.debug(f"Command completed with return code: {returncode}")
        self._logger.debug(f"stdout: {stdout[:100]}{'...' if len(stdout) > 100 else ''}")
        if stderr:
            self._logger.debug(f"stderr: {stderr}")

        return stdout, stderr, returncode

    async def execute_command(
        self,
        command: str,
        cwd: Optional[Union[str, Path]] = None
    ) -> str:
        """
        Execute a command and return its stdout.

        Raises:
            ProcessExecutionError: On a nonzero exit code or any stderr output,
                even when the exit code is zero.
        """
        stdout, stderr, returncode = await self.run(command, cwd=cwd)

        if returncode != 0:
            raise ProcessExecutionError(
                f"Command '{command}' exited with code {returncode}: {stderr.strip() or stdout.strip()}",
                command, returncode, stdout, stderr
            )
        if stderr:
            raise ProcessExecutionError(stderr.strip(), command, returncode, stdout, stderr)

        return stdout
