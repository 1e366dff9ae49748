"""Allow ``python -m openapi2lua``."""

from openapi2lua.app import main

main()
