"""
Regenerates assets/build/ from the route registry.
Run from the project root:
- radar-rules.json / radar-rules.js: radar rules grouped by domain
- maintainers.json: maintainers per route
- routes.json: the full registry
"""
from route_assets.build import cli

cli()
