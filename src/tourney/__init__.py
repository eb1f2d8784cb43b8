"""
Tournament structure engine: bracket and group generation, result
propagation, standings and bracket layout.
"""
