"""git-overlap: find open pull requests that touch the files you are about to change."""

__version__ = "0.1.0"
