"""Block-tree data model, ports and label utilities."""
