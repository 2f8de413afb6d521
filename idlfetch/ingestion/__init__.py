# Ingestion package for idlfetch
"""
Account fetching from Solana clusters.

Returns raw account bytes only; decoding lives in idlfetch.account.
"""
