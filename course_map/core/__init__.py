"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants, reserved feature types, exit codes
- exceptions: Custom exception hierarchy
"""
