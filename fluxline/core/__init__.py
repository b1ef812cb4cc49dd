"""
Query execution, ingestion and the point store collaborator
"""
