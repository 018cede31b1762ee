from files_store.cli import cli

cli()
