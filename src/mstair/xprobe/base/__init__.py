"""
package: mstair.xprobe.base
"""

# <AUTOGEN_INIT>
from mstair.xprobe.base import (
    config,
    context_managers,
    fs_helpers,
    git_helpers,
    types,
)


__all__ = [
    "config",
    "context_managers",
    "fs_helpers",
    "git_helpers",
    "types",
]
# </AUTOGEN_INIT>
