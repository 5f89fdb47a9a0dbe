"""CLI entrypoint: Typer app definition and command registration"""

import typer

from memoria.cli.commands import get_cmd, ingest_cmd, init_cmd, list_cmd, search_cmd


app = typer.Typer(name="memoria", no_args_is_help=True, help="Markdown knowledge base with ranked search")

app.command(name="init")(init_cmd)
app.command(name="ingest")(ingest_cmd)
app.command(name="list")(list_cmd)
app.command(name="search")(search_cmd)
app.command(name="get")(get_cmd)
