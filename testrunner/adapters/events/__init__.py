"""Event stream adapters.

- go_json: decoder for ``go test -json`` output
"""
