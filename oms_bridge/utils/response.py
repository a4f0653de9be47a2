from flask import jsonify

def success_response(message="Success", data=None, code=200):
    response = {
        "success": True,
        "message": message,
        "data": data
    }
    return jsonify(response), code

def error_response(message="An error occurred", error=None, code=400):
    return jsonify({
        "success": False,
        "message": message,
        "error": error
    }), code

def result_response(result, failure_code=502):
    """Turn a workflow result dict into a JSON response."""
    if result.get("success"):
        return success_response(result.get("message"), data=result.get("data"))
    return error_response(result.get("message"), error=result.get("error"), code=result.get("code", failure_code))
