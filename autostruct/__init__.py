"""autostruct: generate Rust data types from a database catalog."""

__version__ = "0.1.0"
