# vw - VHDL workspace manager
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("vhdl-workspace")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
