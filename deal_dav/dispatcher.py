"""
    the request dispatcher: maps (method, path) to a synthetic WebDAV response
"""

from dataclasses import dataclass, field
from typing import Callable
import datetime
import http.client  # for HTTP status codes constants
import logging
import re

from jinja2 import Environment, PackageLoader, select_autoescape

from .props import PropfindResponseBuilder
from .utils import equals_ignoring_case, folder_href, leaf_name, utcnow

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------
SHORTCUT_FILENAME = "new_deal_site.url"
NOTICE_FILENAME = "THIS_DEAL_SITE_HAS_BEEN_MOVED_TO_NEW_LOCATION.txt"

# Notice first, then shortcut
ENTRY_NAMES = (NOTICE_FILENAME, SHORTCUT_FILENAME)

# Declared sizes differ between a folder listing and a single-entry PROPFIND.
LISTING_CONTENT_LENGTHS = {NOTICE_FILENAME: 100, SHORTCUT_FILENAME: 50}
SINGLE_ENTRY_CONTENT_LENGTHS = {NOTICE_FILENAME: 50, SHORTCUT_FILENAME: 100}

DEFAULT_REDIRECT_HOST = "www.example.com"

DAV_HEADERS = {
    "DAV": "1, 2",
    "Allow": "OPTIONS, PROPFIND, GET, HEAD",
}

NOT_FOUND = "Not Found"
METHOD_NOT_ALLOWED = "Method Not Allowed"

# /deal/<sitecollection>/<id>[/<rest>]
DEAL_PATH_RE = re.compile(r"/deal/\d+/(\d+)(?:/(.*))?", re.ASCII | re.DOTALL)


# ------------------------------------------------------------------------------
@dataclass
class DAVResponse:
    """
    A response descriptor, independent of the server that writes it
    """

    status: int = http.client.OK
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None

    @property
    def status_text(self) -> str:
        return http.client.responses.get(self.status, "")


# ------------------------------------------------------------------------------
class DealRequestDispatcher:
    """
    Serves a virtual deal folder holding exactly two pseudo-files.
    Stateless: every call builds its answer from the method, the path and the
    current time only.
    """

    def __init__(
        self,
        redirect_host: str = DEFAULT_REDIRECT_HOST,
        basename: Callable[[str], str] = leaf_name,
        clock: Callable[[], datetime.datetime] = utcnow,
    ):
        """
        :param redirect_host: host the redirect URLs point to
        :param basename: reduces the trailing part of the path to a bare file name
        :param clock: returns the time reported as the entries' last modification
        """
        self.redirect_host = redirect_host
        self.basename = basename
        self.clock = clock
        self.jinja_env = Environment(
            loader=PackageLoader(__package__, "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.handlers = {
            "OPTIONS": self.options,
            "GET": self.get,
            "PROPFIND": self.propfind,
        }

    def redirect_url(self, deal_id: str) -> str:
        return f"http://{self.redirect_host}/redirect/{deal_id}"

    def dispatch(self, method: str, pathname: str, root_path: str = "") -> DAVResponse:
        """
        Build the response for a request
        :param method: the HTTP method
        :param pathname: the request path, relative to ``root_path``
        :param root_path: prefix the application is mounted under
        """
        match = DEAL_PATH_RE.fullmatch(pathname)
        if not match:
            logger.debug("%s %s: path does not name a deal folder", method, pathname)
            return self.plain_text(http.client.NOT_FOUND, NOT_FOUND)

        deal_id, rest = match.groups()
        file_name = self.basename(rest) if rest else ""

        response = DAVResponse(headers=dict(DAV_HEADERS))
        handler = self.handlers.get(method)
        if handler is None:
            logger.debug("%s %s: method not allowed", method, pathname)
            return self.plain_text(
                http.client.METHOD_NOT_ALLOWED, METHOD_NOT_ALLOWED, response
            )
        handler(response, deal_id, file_name, concat_path(root_path, pathname))
        return response

    def options(self, response: DAVResponse, deal_id: str, file_name: str, href: str):
        pass

    def get(self, response: DAVResponse, deal_id: str, file_name: str, href: str):
        if equals_ignoring_case(file_name, SHORTCUT_FILENAME):
            response.headers["Content-Type"] = "application/x.mswinurl"
            response.body = self.render(
                SHORTCUT_FILENAME, redirect_url=self.redirect_url(deal_id)
            )
        elif equals_ignoring_case(file_name, NOTICE_FILENAME):
            response.headers["Content-Type"] = "text/plain"
            response.body = self.render(
                "notice.txt", redirect_url=self.redirect_url(deal_id)
            )
        elif "." not in file_name:
            response.headers["Content-Type"] = "text/html"
            response.body = self.render(
                "dir_listing.html", path=href, entries=ENTRY_NAMES
            )
        else:
            logger.debug("GET %s: unknown file %r", href, file_name)
            self.plain_text(http.client.NOT_FOUND, NOT_FOUND, response)

    def propfind(self, response: DAVResponse, deal_id: str, file_name: str, href: str):
        response.headers["Content-Type"] = "application/xml; charset=utf-8"
        response.status = http.client.MULTI_STATUS

        base_url = folder_href(href)
        builder = PropfindResponseBuilder(
            self.jinja_env.get_template("multistatus.xml"), self.clock()
        )
        if "." not in file_name:
            builder.add_response(base_url, is_dir=True)
            for name in ENTRY_NAMES:
                builder.add_response(base_url + name, LISTING_CONTENT_LENGTHS[name])
        elif file_name in SINGLE_ENTRY_CONTENT_LENGTHS:
            builder.add_response(
                base_url + file_name, SINGLE_ENTRY_CONTENT_LENGTHS[file_name]
            )
        else:
            logger.debug("PROPFIND %s: unknown file %r", href, file_name)
            response.status = http.client.NOT_FOUND
            return
        response.body = builder.to_xml()

    def render(self, template_name: str, **context) -> str:
        return self.jinja_env.get_template(template_name).render(**context)

    def plain_text(
        self, status: int, text: str, response: DAVResponse | None = None
    ) -> DAVResponse:
        response = response or DAVResponse()
        response.status = status
        response.headers["Content-Type"] = "text/plain; charset=utf-8"
        response.body = text
        return response


# ------------------------------------------------------------------------------
def concat_path(root_path: str, path: str) -> str:
    """
    Join the mount prefix and the app-relative path, as the client sees it
    """
    if not root_path:
        return path
    return root_path.rstrip("/") + path


__all__ = [
    "DAVResponse",
    "DealRequestDispatcher",
    "SHORTCUT_FILENAME",
    "NOTICE_FILENAME",
]
