"""Remote operation API.

Typed wrappers over AsyncRequestClient.call for each remote operation.
Each wrapper builds the operation payload, picks the request type, and
maps the `ok` payload to the operation's success value:
- mutating operations (write, append, copy, rename, remove, create_dir,
  watch) complete with True
- queries complete with the `ok` payload unchanged
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .client import AsyncRequestClient
from .protocol.classifier import Outcome
from .protocol.envelope import RequestType
from .registry import Completion


def _done(_: Any) -> bool:
    return True


def _unchanged(data: Any) -> Any:
    return data


@dataclass(frozen=True)
class Operation:
    """A remote operation: request type plus success-value mapping."""

    name: str
    request_type: RequestType
    to_result: Callable[[Any], Any] = _unchanged


OPERATIONS: dict[str, Operation] = {
    op.name: op
    for op in (
        Operation("append_file", RequestType.FILE_APPEND, _done),
        Operation("append_file_text", RequestType.FILE_APPEND_TEXT, _done),
        Operation("capabilities", RequestType.CAPABILITIES),
        Operation("copy", RequestType.COPY, _done),
        Operation("create_dir", RequestType.DIR_CREATE, _done),
        Operation("exists", RequestType.EXISTS),
        Operation("metadata", RequestType.METADATA),
        Operation("read_dir", RequestType.DIR_READ),
        Operation("read_file", RequestType.FILE_READ),
        Operation("read_file_text", RequestType.FILE_READ_TEXT),
        Operation("remove", RequestType.REMOVE, _done),
        Operation("rename", RequestType.RENAME, _done),
        Operation("spawn", RequestType.PROC_SPAWN),
        Operation("spawn_wait", RequestType.PROC_SPAWN_WAIT),
        Operation("system_info", RequestType.SYSTEM_INFO),
        Operation("watch", RequestType.WATCH, _done),
        Operation("write_file", RequestType.FILE_WRITE, _done),
        Operation("write_file_text", RequestType.FILE_WRITE_TEXT, _done),
    )
}


def _params(**kwargs: Any) -> dict[str, Any]:
    """Build a payload, leaving out options that were not given."""
    return {k: v for k, v in kwargs.items() if v is not None}


@dataclass
class RemoteApi:
    """Remote filesystem, process and system operations.

    Every method takes a completion invoked once with (error, None) or
    (None, result), and returns the send outcome of the underlying call.

    Usage:
        api = RemoteApi(client)
        api.write_file_text("notes.txt", "hello", lambda err, ok: ...)

        info = await api.request("system_info")
    """

    _client: AsyncRequestClient

    @property
    def client(self) -> AsyncRequestClient:
        return self._client

    def invoke(self, name: str, params: dict[str, Any], completion: Completion) -> Outcome:
        """Invoke an operation by name.

        Options whose value is None are left out of the payload.

        Raises:
            KeyError: If the operation is unknown
        """
        op = OPERATIONS[name]

        def on_complete(error: str | None, data: Any) -> None:
            if error is not None:
                completion(error, None)
            else:
                completion(None, op.to_result(data))

        return self._client.call(op.request_type, _params(**params), on_complete)

    async def request(self, name: str, **params: Any) -> Any:
        """Invoke an operation by name and await its result.

        Raises:
            KeyError: If the operation is unknown
            RequestError: On send failure, error response or timeout
        """
        op = OPERATIONS[name]
        data = await self._client.request(op.request_type, _params(**params))
        return op.to_result(data)

    # Files

    def read_file(self, path: str, completion: Completion) -> Outcome:
        return self.invoke("read_file", {"path": path}, completion)

    def read_file_text(self, path: str, completion: Completion) -> Outcome:
        return self.invoke("read_file_text", {"path": path}, completion)

    def write_file(self, path: str, data: list[int] | bytes, completion: Completion) -> Outcome:
        return self.invoke("write_file", {"path": path, "data": list(data)}, completion)

    def write_file_text(self, path: str, text: str, completion: Completion) -> Outcome:
        return self.invoke("write_file_text", {"path": path, "text": text}, completion)

    def append_file(self, path: str, data: list[int] | bytes, completion: Completion) -> Outcome:
        return self.invoke("append_file", {"path": path, "data": list(data)}, completion)

    def append_file_text(self, path: str, text: str, completion: Completion) -> Outcome:
        return self.invoke("append_file_text", {"path": path, "text": text}, completion)

    # Filesystem

    def copy(self, src: str, dst: str, completion: Completion) -> Outcome:
        return self.invoke("copy", {"src": src, "dst": dst}, completion)

    def rename(self, src: str, dst: str, completion: Completion) -> Outcome:
        return self.invoke("rename", {"src": src, "dst": dst}, completion)

    def remove(self, path: str, completion: Completion, force: bool = False) -> Outcome:
        return self.invoke("remove", {"path": path, "force": force}, completion)

    def create_dir(self, path: str, completion: Completion, parents: bool = False) -> Outcome:
        return self.invoke("create_dir", {"path": path, "all": parents}, completion)

    def exists(self, path: str, completion: Completion) -> Outcome:
        return self.invoke("exists", {"path": path}, completion)

    def metadata(
        self,
        path: str,
        completion: Completion,
        canonicalize: bool = False,
        resolve_file_type: bool = False,
    ) -> Outcome:
        params = {
            "path": path,
            "canonicalize": canonicalize,
            "resolve_file_type": resolve_file_type,
        }
        return self.invoke("metadata", params, completion)

    def read_dir(
        self,
        path: str,
        completion: Completion,
        depth: int = 1,
        absolute: bool = False,
        canonicalize: bool = False,
        include_root: bool = False,
    ) -> Outcome:
        params = {
            "path": path,
            "depth": depth,
            "absolute": absolute,
            "canonicalize": canonicalize,
            "include_root": include_root,
        }
        return self.invoke("read_dir", params, completion)

    def watch(
        self,
        path: str,
        completion: Completion,
        recursive: bool = False,
        only: list[str] | None = None,
        except_: list[str] | None = None,
    ) -> Outcome:
        params = {"path": path, "recursive": recursive, "only": only, "except": except_}
        return self.invoke("watch", params, completion)

    # Processes

    def spawn(
        self,
        cmd: str,
        completion: Completion,
        environment: dict[str, str] | None = None,
        current_dir: str | None = None,
        pty: dict[str, int] | None = None,
    ) -> Outcome:
        params = {
            "cmd": cmd,
            "environment": environment,
            "current_dir": current_dir,
            "pty": pty,
        }
        return self.invoke("spawn", params, completion)

    def spawn_wait(
        self,
        cmd: str,
        completion: Completion,
        environment: dict[str, str] | None = None,
        current_dir: str | None = None,
    ) -> Outcome:
        params = {"cmd": cmd, "environment": environment, "current_dir": current_dir}
        return self.invoke("spawn_wait", params, completion)

    # System

    def system_info(self, completion: Completion) -> Outcome:
        return self.invoke("system_info", {}, completion)

    def capabilities(self, completion: Completion) -> Outcome:
        return self.invoke("capabilities", {}, completion)
