#!/usr/bin/env python3
"""
Main entry point for GeoMatchX.

Serves the JSON API. Run directly to also start the background scheduler
that refreshes candidate/job matches and prunes old notifications.
"""

from app import create_app

app = create_app()

if __name__ == '__main__':
    from scheduler import start_background_services

    start_background_services(app)

    app.run(host='0.0.0.0', port=5000, debug=True, use_reloader=False)
