# app/api/v1/cors.py
from fastapi import Response, status

ALLOWED_HEADERS = "Content-Type, Authorization"

def preflight_response(methods: str) -> Response:
    """
    Explicit answer to OPTIONS on mutating routes.

    CORSMiddleware already answers browser preflights (requests carrying Origin
    and Access-Control-Request-Method); this covers bare OPTIONS probes.
    """
    return Response(
        status_code=status.HTTP_200_OK,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": methods,
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        },
    )
