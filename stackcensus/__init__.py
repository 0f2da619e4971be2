"""stackcensus - version census of a fixed server stack."""

__version__ = "1.0.0"
