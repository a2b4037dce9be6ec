from flask import Response

from shopfront.app.common.request_context import REQUEST_ID_HEADER, current_request_id

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "Surrogate-Control": "no-store",
}


def apply_response_headers(response: Response) -> Response:
    """Disable caching on every response and echo the request id."""
    for name, value in NO_CACHE_HEADERS.items():
        response.headers[name] = value
    rid = current_request_id()
    if rid:
        response.headers[REQUEST_ID_HEADER] = rid
    return response
