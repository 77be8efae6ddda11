from urllib.parse import quote
import datetime
import unicodedata

import fs.path


# ------------------------------------------------------------------------------
def folder_href(*parts: str) -> str:
    """
    Build a normalized collection href: every non-empty segment of the given
    parts joined by slashes, with a leading and a trailing slash
    """
    segments = [quote(s) for p in parts for s in p.split("/") if s]
    if not segments:
        return "/"
    return f"/{'/'.join(segments)}/"


# ------------------------------------------------------------------------------
def leaf_name(path: str) -> str:
    """
    Reduce a (possibly hostile) relative path to its last component,
    e.g. ``../../etc/passwd`` -> ``passwd``
    """
    return fs.path.basename(path.replace("\\", "/").rstrip("/"))


# ------------------------------------------------------------------------------
def _base_form(s: str) -> str:
    decomposed = unicodedata.normalize("NFKD", s)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def equals_ignoring_case(a: str, b: str) -> bool:
    """
    Compare two strings ignoring case and diacritics ("FILE.TXT" == "file.txt")
    """
    return _base_form(a) == _base_form(b)


# ------------------------------------------------------------------------------
def to_rfc_1123(dt: datetime.datetime) -> str:
    """
    Convert a datetime object to a string in RFC 1123 format
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(datetime.timezone.utc)
    return dt.strftime("%a, %d %b %Y %H:%M:%S GMT")


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)
