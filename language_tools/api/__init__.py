"""Interface adapters.

Module split:
    - `envelope`: `{isError, content}` response envelope and the tool boundary.
    - `http_api`: FastAPI surface over the enabled tools.
    - `cli`: operator command line over the enabled tools.
"""
