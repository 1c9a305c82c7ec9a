"""Development entry point: ``python app.py`` or ``flask --app app run``."""

from src.timeclock.timeclock.main import create_app

app = create_app()

if __name__ == "__main__":
    # use_reloader=False: the reloader would start a second copy of the daily scheduler.
    app.run(debug=app.config["DEBUG"], use_reloader=False)
