"""fieldmapper - map DTO fields onto DAO fields for code generation."""

__version__ = "0.1.0"
