"""
package: mstair.xprobe
"""

# <AUTOGEN_INIT>
from mstair.xprobe import (
    argument_splitter,
    base,
    call_site,
    decorators,
    frames,
    path_resolver,
    settings,
    source_snippet,
    source_stripper,
    stack_walker,
    trace_normalizer,
    value_tree,
    xlogging,
    xprobe_api,
)
from mstair.xprobe.settings import Mode, XProbeSettings
from mstair.xprobe.xprobe_api import Dumped, XProbe, d, dd, ddd, s, sd


__all__ = [
    "Dumped",
    "Mode",
    "XProbe",
    "XProbeSettings",
    "argument_splitter",
    "base",
    "call_site",
    "d",
    "dd",
    "ddd",
    "decorators",
    "frames",
    "path_resolver",
    "s",
    "sd",
    "settings",
    "source_snippet",
    "source_stripper",
    "stack_walker",
    "trace_normalizer",
    "value_tree",
    "xlogging",
    "xprobe_api",
]
# </AUTOGEN_INIT>

__version__ = "0.1.0"
