"""Package containing the dominating set puzzle."""
__version__ = "1.0.0"
