from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("wg-show")
except PackageNotFoundError:
    __version__ = "1.0.8"
