# idlfetch
# Anchor IDL retrieval from Solana clusters

"""
Fetches the IDL document an Anchor program publishes on-chain, validates
the IDL account's binary framing and saves the document as JSON.
"""
