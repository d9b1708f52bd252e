"""Manifest specification for the tool registry.

This package provides the structural half of manifest verification:
1. Schema — JSON Schema describing a published manifest
2. Validator — walks a payload against the schema, collecting every violation
3. Manifest — typed view of a payload that passed validation
"""

MANIFEST_VERSION = "0.1"
WELL_KNOWN_PATH = "/.well-known/webmcp.json"
