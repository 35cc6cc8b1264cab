"""dvote: process-parameter data model and tuple codec for the voting contracts."""

__version__ = "0.1.0"
