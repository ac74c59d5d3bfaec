"""
TaskFlow backend package.

Build the FastAPI application with ``taskflow_api.main.create_app``; the
``taskflow-api`` console script serves it with uvicorn.
"""
