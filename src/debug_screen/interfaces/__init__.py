"""Protocol definitions for pluggable collaborators."""

from .locator import SourceLocator
from .request import RequestContext, ResponseSink

__all__ = ["RequestContext", "ResponseSink", "SourceLocator"]
