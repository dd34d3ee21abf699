from app.fazbook import create_app

app = create_app()
