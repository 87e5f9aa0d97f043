"""
SatLedger: CelesTrak TLE ingestion with orbit derivation and deduplicated storage.
"""

__version__ = "0.1.0"
