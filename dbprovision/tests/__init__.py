"""
Test suite for dbprovision.

- Configuration parsing and parameter mapping
- Driver resolution and URL building
- Connection events and the subscriber registry
- Schema introspection and drop statement generation
- The coordinator's fallback, reset and connection acquisition paths
"""
