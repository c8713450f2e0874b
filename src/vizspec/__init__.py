"""vizspec package root."""

from vizspec.exceptions import ConfigError, NeverThrown, SpecParseError, VizspecError
from vizspec.invariants import never
from vizspec.json_types import DELETE

__all__ = [
    "__version__",
    "ConfigError",
    "DELETE",
    "NeverThrown",
    "SpecParseError",
    "VizspecError",
    "never",
]

__version__ = "0.1.0"
