from broker import create_app

app = create_app()

if __name__ == '__main__':
    try:
        app.run(host=app.config['HOST'], port=app.config['PORT'], threaded=True)
    finally:
        app.extensions['game_sweeper'].stop()
