"""Rose Token merge bridge: merges worker pull requests on on-chain task approval."""

__version__ = "1.0.0"
