__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'commandtools'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .strings import *
from .types import *
from .naming import *
from .parameters import *
from .results import *
from .commands import *
from .dispatch import *
from .registry import *
from .docs import *
from .defaults import *
from .shell import *
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

# Load the exposed API of the tokenizer
__all__ += strings.__all__  # type: ignore[attr-defined]
# Load the exposed API of the type system
__all__ += types.__all__  # type: ignore[attr-defined]
# Load the exposed API of the naming rules
__all__ += naming.__all__  # type: ignore[attr-defined]
# Load the exposed API of the descriptors
__all__ += parameters.__all__  # type: ignore[attr-defined]
__all__ += results.__all__  # type: ignore[attr-defined]
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the dispatcher and registry
# (the dispatch() function shadows its module here)
__all__ += __import__("sys").modules[__name__ + ".dispatch"].__all__
__all__ += registry.__all__  # type: ignore[attr-defined]
# Load the exposed API of the documentation and default commands
__all__ += docs.__all__  # type: ignore[attr-defined]
__all__ += defaults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the command loop
__all__ += shell.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
