"""Package metadata."""

PACKAGE_NAME = "cloudcontrol-provider"
__version__ = "0.1.0"
USER_AGENT = f"{PACKAGE_NAME}/{__version__}"
