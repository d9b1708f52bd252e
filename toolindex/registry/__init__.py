"""Registry — bookkeeping around the verification and scoring core.

The registry provides:
- Submission: verify an origin and record status, tools, and a check
- Lookup: current status, recent checks, trust-annotated detail
- Discovery: origin search and ranked tool search
"""
