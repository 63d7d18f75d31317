__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'clispec'
__license__ = 'Apache-2.0'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .variables import *
from .vectors import *
from .grammar import *
from .printer import *
from .faults import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the variables
__all__ += variables.__all__  # type: ignore[attr-defined]
# Load the exposed API of the vectors
__all__ += vectors.__all__  # type: ignore[attr-defined]
# Load the exposed API of the grammar objects
__all__ += grammar.__all__  # type: ignore[attr-defined]
# Load the exposed API of the printer
__all__ += printer.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
