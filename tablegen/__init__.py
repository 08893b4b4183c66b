"""tablegen - table metadata code generator for Go model structs."""

__version__ = "0.1.0"
