"""
dbml-codegen: Entity Framework code generation from database schemas.
"""

__version__ = "0.1.0"
