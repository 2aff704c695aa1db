"""ccdb — compilation semantics for GNU-compatible compiler calls.

Classifies the arguments of an intercepted compiler invocation and rebuilds
one single-source invocation per compiled file, the records a compilation
database is made of.
"""

import logging

__version__ = "0.1.0"

# Silent as a library; ccdb.cli.setup_logging attaches a stderr handler.
logging.getLogger(__name__).addHandler(logging.NullHandler())
