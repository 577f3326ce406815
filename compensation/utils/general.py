# compensation/utils/general.py
"""
General-purpose helpers shared by the HTTP layer.
"""

from flask import jsonify


def _handle_service_result(result, default_error_status=500):
    """
    Parses the result from a service function.
    If it's a tuple (error_dict, status_code), it uses the custom status code.
    Otherwise, it assumes success (status 200) or uses the default error status.

    Adds 'error_code' field to error responses for structured frontend handling.
    """
    if isinstance(result, tuple) and len(result) == 2:
        error_dict, status_code = result
        if not error_dict.get("success", True):
            error_dict["error_code"] = error_dict.get("error_code", status_code)
        return jsonify(error_dict), status_code

    if result.get("success"):
        return jsonify(result), 200

    result["error_code"] = result.get("error_code", default_error_status)
    return jsonify(result), default_error_status


def convert_to_json_safe(obj):
    """
    Recursively converts values to JSON-safe types.
    NaN and infinite floats (e.g. attainment against an empty period) become None.
    """
    if isinstance(obj, dict):
        return {k: convert_to_json_safe(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [convert_to_json_safe(i) for i in obj]
    elif isinstance(obj, float):
        if obj != obj:  # NaN check
            return None
        if obj == float('inf') or obj == float('-inf'):
            return None
        return obj
    return obj
