"""
The MODEL layer contains pure, immutable data structures.
It has NO knowledge of how values are scaled or cached.
It deals with Screen Metrics, Qualifier Overrides and Scaling Specs.
"""
