"""
Sibyl Oracle API (FastAPI)

HTTP surface of a performer/validator node:
- POST /predictions - Register a prediction
- GET /predictions[/{id}] - Inspect the registry
- POST /execute - Ad-hoc execution
- POST /validate - Validator vote on a proof
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
