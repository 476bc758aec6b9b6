from __future__ import annotations

import asyncio
import contextlib

from sticktable_exporter.core.errors import ControlSocketConnectionError
from sticktable_exporter.logging import bind_context

READ_CHUNK_SIZE = 65536


class ControlSocketClient:
    """
    Client for the HAProxy admin (control) socket.

    Every command runs in its own session: connect, write the command,
    read until HAProxy closes the connection, disconnect. The protocol
    has no length prefix or terminator, so end of response is the peer
    closing the stream.

    No timeout is applied unless one is given; a peer that never closes
    the connection blocks the caller indefinitely.
    """

    def __init__(self, socket_path: str, *, timeout: float | None = None) -> None:
        self._socket_path = socket_path
        self._timeout = timeout

    @property
    def socket_path(self) -> str:
        return self._socket_path

    async def execute(self, command: str) -> str:
        """Run one command and return the full response text."""
        log = bind_context(socket=self._socket_path, command=command)
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_unix_connection(self._socket_path),
                timeout=self._timeout,
            )
        except (OSError, asyncio.TimeoutError) as exc:
            log.warning("control_socket_connect_failed", error=str(exc))
            raise ControlSocketConnectionError(
                "could not connect to control socket",
                details={"socket": self._socket_path, "command": command},
            ) from exc

        chunks: list[bytes] = []
        try:
            writer.write(f"{command}\n".encode())
            await writer.drain()
            while True:
                chunk = await asyncio.wait_for(reader.read(READ_CHUNK_SIZE), timeout=self._timeout)
                if not chunk:
                    break
                chunks.append(chunk)
        except (OSError, asyncio.TimeoutError) as exc:
            # no frame integrity on this protocol; hand back what arrived
            log.warning(
                "control_socket_read_error",
                received_bytes=sum(len(c) for c in chunks),
                error=str(exc) or type(exc).__name__,
            )
        finally:
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()

        return b"".join(chunks).decode("utf-8", errors="replace")
