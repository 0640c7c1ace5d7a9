"""vid2blog - YouTube video to blog article pipeline."""

__version__ = "0.1.0"
