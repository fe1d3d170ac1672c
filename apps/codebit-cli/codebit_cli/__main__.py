from codebit_cli.cli import app

app(prog_name="codebit")
