"""HTTP interface: a single endpoint turning a paper JSON body into a PDF."""

from .server import PDF_FILENAME, app, create_app

__all__ = ["app", "create_app", "PDF_FILENAME"]
