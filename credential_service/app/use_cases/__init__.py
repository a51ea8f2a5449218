"""
Credential Service Use Cases

Application business logic organized by domain.
"""
