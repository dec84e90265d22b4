"""
Cached reads and mutations for each API resource family.

Every function takes a ``SiteClient`` first. Reads go through the query
cache; writes go through ``SiteClient.mutate`` and declare which keys they
invalidate.
"""
