# relay/utils/responses.py

def format_response(success: bool, data=None, message: str = ""):
    body = {
        "success": success,
        "message": message,
    }
    if data is not None:
        body["data"] = data
    return body

def format_error_response(exc, status_code=500, detail=None):
    return {
        "success": False,
        "error": {
            "type": exc.__class__.__name__,
            "detail": detail if detail is not None else str(getattr(exc, "detail", exc)),
            "status_code": status_code
        }
    }
