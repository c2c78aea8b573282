"""Natural-language queries over uploaded datasets.

A query is matched against an ordered table of regular-expression patterns; the first match
selects a deterministic row filter. Queries that match no pattern fall back to a plain substring
search across every dataset.
"""
