from app.prioritizer import create_app

app = create_app()
