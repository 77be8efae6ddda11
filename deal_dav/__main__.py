from argparse import ArgumentParser
import logging
import os

from fastapi import FastAPI
import uvicorn

from . import DealDAVApp
from .dispatcher import DEFAULT_REDIRECT_HOST


def make_app(redirect_host: str, mount: str = ""):
    dav = DealDAVApp(redirect_host=redirect_host)
    if not mount:
        return dav
    app = FastAPI()
    app.mount(mount, dav)
    return app


def main():
    parser = ArgumentParser(prog="deal_dav", description="WebDAV deal folder server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", default=int(os.environ.get("PORT", 3000)), type=int)
    parser.add_argument("--mount", default="", help="serve under this path prefix")
    parser.add_argument("--redirect-host", default=DEFAULT_REDIRECT_HOST)
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = make_app(args.redirect_host, args.mount)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
