"""
Orchestration layer: error taxonomy, rewrite context and pipeline.
"""
