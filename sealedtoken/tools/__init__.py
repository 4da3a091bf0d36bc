"""
Command line tools for sealedtoken.
"""
