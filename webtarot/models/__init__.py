"""Database models package.

Submodules are imported explicitly (see webtarot.app) so that the enums
module stays importable from the domain layer without pulling in the ORM.
"""
