"""Dataset validation.

A declarative per-kind rule table (`specs`) drives a generic engine (`engine`) built from small
check primitives (`checks`). The pipeline attaches the findings back to each dataset.
"""
