"""toolindex — verification and ranking engine for web tool manifests."""

__version__ = "0.1.0"
