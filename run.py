from compensation import create_app

# Entry point for local development: `python run.py` or `flask --app run db upgrade`.
app = create_app()

if __name__ == '__main__':
    # 'debug=True' allows for hot-reloading when you save changes.
    app.run(debug=True)
