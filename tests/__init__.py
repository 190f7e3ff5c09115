"""Test package for the JEE CBT practice test.

Core tests drive TestSession with a manual ticker so the countdown is
fully deterministic; the API tests run the FastAPI app in-process through
``TestClient``.  No network access is needed.  Run ``pytest`` from the
project root.
"""
