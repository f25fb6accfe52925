"""
Core package for the image toolbox.

- config: Application settings loaded from the environment
- errors: Error taxonomy mapped to HTTP statuses at the route boundary
"""
