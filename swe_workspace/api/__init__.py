"""HTTP surface of the workspace service."""
