from cline_cli.cli import app

app(prog_name="hinter-cline")
