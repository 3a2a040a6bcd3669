"""Language analysis tools behind a uniform response envelope.

Package split:
    - `documents`: long-running document-analysis job orchestration.
    - `text`, `translator`: synchronous service clients.
    - `tools`: tool classes and the static tool registry.
    - `api`: response envelope, HTTP surface and operator CLI.
    - `config`: environment configuration and logging setup.
"""
