from autons.cli import app

app(prog_name="autons")
