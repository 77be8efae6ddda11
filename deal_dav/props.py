import datetime
from dataclasses import dataclass

from jinja2 import Template

from .utils import to_rfc_1123


# ------------------------------------------------------------------------------
@dataclass
class EntryProps:
    """
    The properties reported for one entry of a deal folder.
    Entries are synthesized for each request and never stored.
    """

    href: str
    contentlength: int = 0
    is_dir: bool = False
    modified: datetime.datetime | None = None

    @property
    def lastmodified(self) -> str:
        return to_rfc_1123(self.modified or datetime.datetime.min)

    @property
    def status(self) -> str:
        return "HTTP/1.1 200 OK"


# ------------------------------------------------------------------------------
class PropfindResponseBuilder:
    """
    Collects the ``D:response`` nodes of a PROPFIND answer and renders them
    as a ``D:multistatus`` document
    """

    def __init__(self, template: Template, modified: datetime.datetime):
        self.template = template
        self.modified = modified
        self._responses: list[EntryProps] = []

    def add_response(self, href: str, contentlength: int = 0, is_dir: bool = False):
        self._responses.append(
            EntryProps(href, contentlength, is_dir=is_dir, modified=self.modified)
        )

    def to_xml(self) -> str:
        return self.template.render(responses=self._responses).strip()
