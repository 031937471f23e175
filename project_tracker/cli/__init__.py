"""Terminal client for the Project Tracker (console script ``tracker``)."""
