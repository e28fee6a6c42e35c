"""Mermaid CLI (`mmdc`) adapter used to turn diagram source into PNG bytes."""

from __future__ import annotations

import asyncio
import logging
import tempfile
from pathlib import Path
from typing import Optional, Protocol

from .constants import (
    MMDC_BACKGROUND_DEFAULT,
    MMDC_COMMAND_DEFAULT,
    MMDC_SCALE_DEFAULT,
    RENDER_TIMEOUT_SECONDS_DEFAULT,
)
from .errors import OutputMissing, RenderProcessError, RenderTimeout

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    async def check_available(self) -> tuple[bool, str]: ...

    async def render(self, source: str) -> bytes: ...


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()


class MermaidCliRenderer:
    """Render Mermaid source by running the Mermaid CLI in a temp directory.

    The process is killed and the temp directory removed on every exit path,
    including timeout and task cancellation.
    """

    def __init__(
        self,
        command: str = MMDC_COMMAND_DEFAULT,
        *,
        scale: int = MMDC_SCALE_DEFAULT,
        background_color: str = MMDC_BACKGROUND_DEFAULT,
        timeout: float = RENDER_TIMEOUT_SECONDS_DEFAULT,
    ):
        self.command = command
        self.scale = scale
        self.background_color = background_color
        self.timeout = timeout

    def _render_args(self, input_path: Path, output_path: Path) -> list[str]:
        return [
            self.command,
            "-i", str(input_path),
            "-o", str(output_path),
            "--scale", str(self.scale),
            "--backgroundColor", self.background_color,
        ]

    async def _run(self, args: list[str]) -> tuple[int, str]:
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise RenderProcessError(f"Could not start {args[0]!r}: {e}") from e

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise RenderTimeout(self.timeout) from None
        finally:
            await _terminate(process)

        output = stdout.decode("utf-8", errors="replace").strip() if stdout else ""
        return process.returncode or 0, output

    async def check_available(self) -> tuple[bool, str]:
        """Probe `mmdc --version`. Never raises; returns (ok, info)."""
        try:
            returncode, output = await self._run([self.command, "--version"])
        except RenderTimeout:
            return False, "Mermaid CLI check timed out"
        except RenderProcessError as e:
            return False, str(e)

        if returncode != 0:
            return False, output or f"{self.command} exited with status {returncode}"
        return True, output

    async def render(self, source: str) -> bytes:
        with tempfile.TemporaryDirectory(prefix="mermaid") as tmp:
            tmp_dir = Path(tmp)
            input_path = tmp_dir / "input.mmd"
            output_path = tmp_dir / "output.png"
            input_path.write_text(source, encoding="utf-8")

            returncode, output = await self._run(self._render_args(input_path, output_path))
            if returncode != 0:
                logger.warning("%s exited with status %d: %s", self.command, returncode, output)
                raise RenderProcessError(
                    f"{self.command} exited with status {returncode}: {output}",
                    returncode=returncode,
                    output=output,
                )

            data: Optional[bytes] = None
            if output_path.exists():
                data = output_path.read_bytes()
            if not data:
                raise OutputMissing()

            logger.debug("Rendered %d bytes from %d chars of source", len(data), len(source))
            return data
