from importlib.metadata import PackageNotFoundError, version

try:
    version = version("LogTokenizer")
except PackageNotFoundError:
    version = "0.0.0"
