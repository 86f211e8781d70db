"""Package metadata."""

PACKAGE_NAME = "resilient-provisioning"
__version__ = "0.1.0"
