"""viewstore CLI: browse, fetch and label a ClearCase snapshot view."""

from ._helpers import main  # noqa: F401  (entry point)

# Import command modules to register Click commands with the main group.
from . import _basic, _fetch  # noqa: F401
