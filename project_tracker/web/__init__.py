"""Project Tracker Web - FastAPI application exposing the entity model.

Example Usage:
    ```python
    from project_tracker.web.app import create_app

    app = create_app()
    ```

Run the server with ``tracker-web`` or ``tracker serve``.
"""
