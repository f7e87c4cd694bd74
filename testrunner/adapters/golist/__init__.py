"""Package description adapters backed by ``go list -json``.

- query: runs ``go list -json <package>`` per package
- listing: reads a pre-generated ``go list -json`` listing file
"""
