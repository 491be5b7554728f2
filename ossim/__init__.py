"""Teaching simulator of CPU scheduling and paged virtual memory, with a threaded range-sum tool."""

__version__ = "0.1.0"