"""CFO Helper - financial scenario dashboard backend."""

__version__ = "0.1.0"
