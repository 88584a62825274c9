from route_assets.build import cli

cli()
