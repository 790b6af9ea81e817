from records import create_app

app = create_app()
