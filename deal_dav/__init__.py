"""
    an ASGI application that serves synthetic WebDAV deal folders
"""

from typing import Callable
import datetime
import logging

from asgiref.typing import (
    Scope,
    HTTPScope,
    ASGIReceiveCallable,
    ASGISendCallable,
)

from .dispatcher import (
    DAVResponse,
    DealRequestDispatcher,
    DEFAULT_REDIRECT_HOST,
    NOTICE_FILENAME,
    SHORTCUT_FILENAME,
)
from .utils import leaf_name, utcnow

# ------------------------------------------------------------------------------
__version__ = "0.1.0"

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
class DealDAVApp:
    """
    An ASGI application that answers WebDAV clients browsing deal folders
    """

    def __init__(
        self,
        redirect_host: str = DEFAULT_REDIRECT_HOST,
        basename: Callable[[str], str] = leaf_name,
        clock: Callable[[], datetime.datetime] = utcnow,
    ):
        """
        Create a new DealDAVApp instance
        :param redirect_host: host the redirect URLs point to
        :param basename: path sanitizer applied to the file part of the path
        :param clock: source of the reported modification times
        """
        self.dispatcher = DealRequestDispatcher(
            redirect_host=redirect_host, basename=basename, clock=clock
        )

    async def __call__(
        self, scope: Scope, receive: ASGIReceiveCallable, send: ASGISendCallable
    ):
        if scope["type"] == "lifespan":
            while True:
                message = await receive()
                if message["type"] == "lifespan.startup":
                    await self.startup()
                    await send({"type": "lifespan.startup.complete"})
                elif message["type"] == "lifespan.shutdown":
                    await self.shutdown()
                    await send({"type": "lifespan.shutdown.complete"})
                    return
        elif scope["type"] == "http":
            await self.handle(scope, receive, send)
        else:
            raise ValueError(f"Unsupported scope type {scope['type']}")

    async def startup(self):
        logger.info(
            "serving deal folders, redirecting to %s", self.dispatcher.redirect_host
        )

    async def shutdown(self): ...

    def _get_path_and_root(self, scope: HTTPScope) -> tuple[str, str]:
        root_path = scope.get("root_path", "")
        path = scope["path"]
        if root_path and path.startswith(root_path):
            path = path[len(root_path) :]
        if path == "":
            path = "/"
        return path, root_path

    async def handle(
        self, scope: HTTPScope, receive: ASGIReceiveCallable, send: ASGISendCallable
    ):
        path, root_path = self._get_path_and_root(scope)
        response = self.dispatcher.dispatch(scope["method"], path, root_path)
        logger.debug(
            "%s %s -> %d %s",
            scope["method"],
            scope["path"],
            response.status,
            response.status_text,
        )
        await self.respond(send, response)

    async def respond(self, send: ASGISendCallable, response: DAVResponse):
        body = b"" if response.body is None else response.body.encode()
        headers = dict(response.headers)
        if body:
            headers["Content-Length"] = str(len(body))
        await send(
            {
                "type": "http.response.start",
                "status": response.status,
                "headers": [(k.encode(), v.encode()) for k, v in headers.items()],
            }
        )

        await send(
            {
                "type": "http.response.body",
                "body": body,
            }
        )


__all__ = [
    "DAVResponse",
    "DealDAVApp",
    "DealRequestDispatcher",
    "NOTICE_FILENAME",
    "SHORTCUT_FILENAME",
]
