"""hostkit - single-machine provisioning helper"""

__version__ = "0.3.0"
