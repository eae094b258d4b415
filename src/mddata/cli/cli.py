"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mddata.cli.commands import (
    build_cmd, check_cmd, csv_cmd, data_cmd, events_cmd, get_cmd, html_cmd, part_cmd,
)


app = typer.Typer(name="mddata", no_args_is_help=True, help="Markdown documents as HTML and data")

app.command(name="html")(html_cmd)
app.command(name="data")(data_cmd)
app.command(name="part")(part_cmd)
app.command(name="check")(check_cmd)
app.command(name="events")(events_cmd)
app.command(name="get")(get_cmd)
app.command(name="csv")(csv_cmd)
app.command(name="build")(build_cmd)
