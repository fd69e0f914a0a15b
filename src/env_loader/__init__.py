"""env-loader: resolve environment variables from secret stores, then exec a command."""

__version__ = "0.1.0"
