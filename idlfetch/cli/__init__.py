# CLI package for idlfetch
"""
Command-line interface for fetching Anchor IDLs.

Commands:
    idlfetch fetch    — Fetch and save a program's IDL
    idlfetch address  — Show the derived IDL account address
    idlfetch decode   — Decode a raw IDL account dump
"""
