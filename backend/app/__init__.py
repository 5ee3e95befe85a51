"""
IAQ Sensor Backend
==================

This is the Python package for the backend API.

HOW IT'S ORGANIZED:
------------------
- models/    = Data structures (what does a reading look like? the IAQ table)
- services/  = Workers (store readings, normalize records, call the API)
- routers/   = API endpoints (the doors into our app)
- utils/     = Small helpers (validation, derived metrics)
- main.py    = Puts it all together and starts the server

Author: Sensor Data Collector Team
"""
