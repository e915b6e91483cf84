"""Salesboard - sales leaderboards with target cycles for office TV displays."""

__version__ = "0.1.0"


# The CLI pulls in every layer; load it only when the entry point is used
def __getattr__(name):
    if name == "main":
        from salesboard.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
