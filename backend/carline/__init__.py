"""Top-level package for the Car Line receipt AI service.

This package turns a photographed purchase receipt into a structured,
confidence-scored expense record. It contains the configuration and
error taxonomy (``core``), the pydantic schemas (``models``), the
pipeline stages (``services`` and ``utils``) and the FastAPI routers
(``api``).

To run the API locally you can execute:

```bash
uvicorn carline.api.main:app --app-dir backend --reload
```

Set ``OPENAI_API_KEY`` in the environment or in a ``.env`` file at the
project root; without it the receipt route answers with a configuration
error and ``/ai/health`` reports ``not_configured``.
"""

__all__: list[str] = []
