"""
The only __init__.py in the tests tree.

It makes `tests` an importable package, so test modules can share helpers via
`from tests.helpers...`. Subdirectories work as namespace packages (PEP 420) and
do not need their own __init__.py files.
"""
