from relpack.cli.main import run

run()
