"""
mcp-find-replace - regex find and replace across a markdown vault
"""
__version__ = "0.1.0"
