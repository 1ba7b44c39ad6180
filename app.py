# app.py
"""
Dev entrypoint: `python app.py` (or `flask --app app run`).
The application factory lives in budgetbrew/app.py.
"""

import os

from budgetbrew.app import create_app

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", str(app.config["PORT"])))
    app.run(host="0.0.0.0", port=port, debug=True)
