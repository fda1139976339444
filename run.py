#!/usr/bin/env python3
"""Run script for the Cosmic Paperclip game server."""
import os

from cosmic_paperclip.app import create_app

if __name__ == '__main__':
    app = create_app('development')

    # Initialize database
    with app.app_context():
        from cosmic_paperclip.models import db
        db.create_all()
        print("Database initialized.")

    port = int(os.environ.get('PORT', 5001))
    print("Starting Cosmic Paperclip game server...")
    print(f"API available at http://localhost:{port}/api/game")
    app.run(debug=True, host='0.0.0.0', port=port)
