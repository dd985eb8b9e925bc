"""Sparrow — a minimal async HTTP application scaffold.

Path-based GET/POST routing with ``:name`` parameters, parsed request
bodies, ``status()/json()/send()`` response helpers, and pooled SQL
queries, served as an ASGI app.

Basic usage::

    from sparrow import App

    app = App()

    @app.get("/")
    def index(req, res):
        res.json({"message": "Hello World!"})

    app.run(5000)
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ClientDisconnect",
    "ConfigurationError",
    "Database",
    "DatabaseConfig",
    "DatabaseNotConfigured",
    "Request",
    "Response",
    "ResponseAlreadySent",
    "ServerHandle",
    "SparrowError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import sparrow`` fast while providing a clean top-level API.
    """
    if name == "App":
        from sparrow.app import App

        return App

    if name in ("AppConfig", "DatabaseConfig"):
        from sparrow import config as _config

        return getattr(_config, name)

    if name == "Database":
        from sparrow.data.database import Database

        return Database

    if name == "Request":
        from sparrow.http.request import Request

        return Request

    if name == "Response":
        from sparrow.http.response import Response

        return Response

    if name == "ServerHandle":
        from sparrow.server.serve import ServerHandle

        return ServerHandle

    if name in (
        "ClientDisconnect",
        "ConfigurationError",
        "DatabaseNotConfigured",
        "ResponseAlreadySent",
        "SparrowError",
    ):
        from sparrow import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
