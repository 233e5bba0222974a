"""
Family Decision Spinner.

Responsibilities:
- Serve the meal and restaurant candidate lists over a JSON API.
- Pick random winners server-side and describe the wheel that lands on them.
- Let a single admin curate both lists behind a session login.
"""
