"""
package: mstair.xprobe.decorators
"""

# <AUTOGEN_INIT>
from mstair.xprobe.decorators import (
    base,
    plain,
    rich,
)
from mstair.xprobe.decorators.base import Decorator
from mstair.xprobe.decorators.plain import PlainDecorator
from mstair.xprobe.decorators.rich import RichDecorator


__all__ = [
    "Decorator",
    "PlainDecorator",
    "RichDecorator",
    "base",
    "plain",
    "rich",
]
# </AUTOGEN_INIT>
