from format_converter.cli.main import run

run()
