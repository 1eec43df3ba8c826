from most_replayed.cli import app

app(prog_name="most-replayed")
