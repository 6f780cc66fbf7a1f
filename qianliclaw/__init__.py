"""QianliClaw admin console backend.

A local admin service for the OpenClaw agent runtime: reads and writes the
runtime's JSON5 config, the workspace persona files, and UI settings, and
runs the `openclaw health` check.
"""

__version__ = "0.1.0"
