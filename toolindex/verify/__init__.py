"""Verification — turns a fetched manifest into a status verdict.

The verifier separates I/O from classification: ``fetch_manifest`` performs
the single bounded HTTP request, ``classify`` maps its outcome to exactly one
of verified, invalid or stale.
"""
