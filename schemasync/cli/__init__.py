"""Command-line interface for schemasync."""
