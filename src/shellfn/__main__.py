from shellfn.main import app

app()
