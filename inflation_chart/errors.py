"""Errors raised while loading the dataset or changing the selection."""


class LoadError(Exception):
    """Fetching or parsing the dataset failed. Terminal for the session."""


class EmptyDataError(LoadError):
    """The dataset parsed cleanly but holds no rows."""


class SelectionError(Exception):
    """A selection was attempted while no data is available."""
